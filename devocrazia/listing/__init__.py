"""Listing pipeline: filter, sort and paginate the article catalog."""

from .filters import (
    ALL,
    available_categories,
    available_tags,
    category_counts,
    filter_articles,
    has_active_filters,
)
from .sorting import SORT_LABELS, SortKey, sort_articles
from .paginator import (
    NavItem,
    Page,
    PaginationModel,
    build_pagination,
    navigation_window,
    paginate,
)

__all__ = [
    "ALL",
    "available_categories",
    "available_tags",
    "category_counts",
    "filter_articles",
    "has_active_filters",
    "SORT_LABELS",
    "SortKey",
    "sort_articles",
    "NavItem",
    "Page",
    "PaginationModel",
    "build_pagination",
    "navigation_window",
    "paginate",
]
