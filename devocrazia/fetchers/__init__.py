"""Content fetching layer for article bodies."""

from .content import FALLBACK_CONTENT, ContentFetcher

__all__ = ["FALLBACK_CONTENT", "ContentFetcher"]
