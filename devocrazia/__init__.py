"""Top-level package for the Devocrazia article site.

This package contains the article catalog, the listing pipeline (filter,
sort, paginate), the content fetcher and the document renderer, plus the
command line entrypoint that ties them together.
"""

__all__ = []
