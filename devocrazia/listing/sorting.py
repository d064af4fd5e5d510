from __future__ import annotations

import unicodedata
from typing import Dict, Iterable, List, Literal

from ..models import Article

SortKey = Literal["recent", "oldest", "title"]

SORT_LABELS: Dict[str, str] = {
    "recent": "Most Recent",
    "oldest": "Oldest",
    "title": "Title A-Z",
}


def title_collation_key(title: str) -> str:
    """Accent- and case-insensitive key approximating locale-aware ordering."""
    decomposed = unicodedata.normalize("NFKD", title)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold()


def sort_articles(articles: Iterable[Article], sort_key: SortKey = "recent") -> List[Article]:
    """Return a new, stably sorted list of articles.

    ``recent`` sorts by date descending, ``oldest`` by date ascending and
    ``title`` alphabetically. Items with equal keys keep their input order.
    """
    items = list(articles)
    if sort_key == "recent":
        # sorted() stays stable with reverse=True
        return sorted(items, key=lambda a: a.date, reverse=True)
    if sort_key == "oldest":
        return sorted(items, key=lambda a: a.date)
    if sort_key == "title":
        return sorted(items, key=lambda a: title_collation_key(a.title))
    raise ValueError(f"Unsupported sort key '{sort_key}'. Use one of {sorted(SORT_LABELS)}.")
