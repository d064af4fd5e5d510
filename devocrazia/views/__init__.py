"""Listing and detail views over the article catalog."""

from .detail import LISTING_PATH, ArticleDetailView, DetailState
from .listing import ListingPage, ListingView

__all__ = ["LISTING_PATH", "ArticleDetailView", "DetailState", "ListingPage", "ListingView"]
