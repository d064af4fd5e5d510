"""Listing view state: the query, filter, sort and page inputs of the articles page.

Every filter or sort change sends the view back to page 1; the visible page
is recomputed from the catalog on each :meth:`ListingView.render`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple
from urllib.parse import parse_qs

from ..listing import (
    ALL,
    SORT_LABELS,
    Page,
    PaginationModel,
    SortKey,
    available_categories,
    available_tags,
    build_pagination,
    filter_articles,
    has_active_filters,
    paginate,
    sort_articles,
)
from ..models import Article, ArticleCatalog
from ..utils.logging import get_logger
from ..utils.site_config import DEFAULT_PAGE_SIZE

logger = get_logger("dv.views.listing")

DEFAULT_SORT: SortKey = "recent"


@dataclass(frozen=True, slots=True)
class ListingPage:
    page: Page[Article]
    pagination: PaginationModel
    total_results: int
    active_filters: Tuple[str, ...]
    has_active_filters: bool
    categories: Tuple[str, ...]
    tags: Tuple[str, ...]
    sort: SortKey

    @property
    def articles(self) -> Tuple[Article, ...]:
        return self.page.items

    @property
    def is_empty(self) -> bool:
        return not self.page.items


class ListingView:
    def __init__(
        self,
        catalog: ArticleCatalog,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        query: str = "",
        category: str = ALL,
        tag: str = ALL,
        sort: SortKey = DEFAULT_SORT,
    ) -> None:
        if sort not in SORT_LABELS:
            raise ValueError(f"Unknown sort key: {sort!r}")
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self.catalog = catalog
        self.page_size = page_size
        self._query = query
        self._category = category
        self._tag = tag
        self._sort: SortKey = sort
        self._page = 1

    @classmethod
    def from_query_string(cls, query_string: str, catalog: ArticleCatalog, **kwargs) -> "ListingView":
        """Build a view from a listing URL query such as ``category=CSS``.

        Only ``category`` is honoured; an absent or empty value leaves ``"all"``.
        """
        params = parse_qs(query_string.lstrip("?"))
        category = (params.get("category") or [""])[0]
        if category:
            kwargs["category"] = category
        return cls(catalog, **kwargs)

    # ---------------- Inputs -----------------

    @property
    def query(self) -> str:
        return self._query

    @property
    def category(self) -> str:
        return self._category

    @property
    def tag(self) -> str:
        return self._tag

    @property
    def sort(self) -> SortKey:
        return self._sort

    @property
    def page(self) -> int:
        return self._page

    def set_query(self, query: str) -> None:
        self._query = query
        self._page = 1

    def set_category(self, category: str) -> None:
        self._category = category
        self._page = 1

    def set_tag(self, tag: str) -> None:
        self._tag = tag
        self._page = 1

    def set_sort(self, sort: SortKey) -> None:
        if sort not in SORT_LABELS:
            raise ValueError(f"Unknown sort key: {sort!r}")
        self._sort = sort
        self._page = 1

    def clear_filters(self) -> None:
        """Reset search, category, tag and sort to their defaults."""
        self._query = ""
        self._category = ALL
        self._tag = ALL
        self._sort = DEFAULT_SORT
        self._page = 1

    # ---------------- Navigation -----------------

    def results(self) -> List[Article]:
        filtered = filter_articles(self.catalog, query=self._query, category=self._category, tag=self._tag)
        return sort_articles(filtered, self._sort)

    def total_pages(self) -> int:
        return paginate(self.results(), self.page_size, 1).total_pages

    def go_to(self, page: int) -> int:
        """Jump to ``page``, clamped into ``[1, total_pages]``."""
        self._page = min(max(1, page), self.total_pages())
        return self._page

    def next_page(self) -> int:
        return self.go_to(self._page + 1)

    def previous_page(self) -> int:
        return self.go_to(self._page - 1)

    # ---------------- Output -----------------

    def active_filters(self) -> Tuple[str, ...]:
        badges: List[str] = []
        if self._category != ALL:
            badges.append(self._category)
        if self._tag != ALL:
            badges.append(self._tag)
        return tuple(badges)

    def render(self, page: Optional[int] = None) -> ListingPage:
        if page is not None:
            self._page = page
        results = self.results()
        current = paginate(results, self.page_size, self._page)
        logger.debug(
            "Listing query=%r category=%s tag=%s sort=%s -> %s results, page %s/%s",
            self._query,
            self._category,
            self._tag,
            self._sort,
            len(results),
            current.number,
            current.total_pages,
        )
        return ListingPage(
            page=current,
            pagination=build_pagination(current.total_pages, current.number),
            total_results=len(results),
            active_filters=self.active_filters(),
            has_active_filters=has_active_filters(query=self._query, category=self._category, tag=self._tag),
            categories=(ALL, *available_categories(self.catalog)),
            tags=(ALL, *available_tags(self.catalog)),
            sort=self._sort,
        )
