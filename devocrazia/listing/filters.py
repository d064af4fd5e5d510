from __future__ import annotations

from typing import Dict, Iterable, List

from ..models import Article

ALL = "all"


def _matches_query(article: Article, needle: str) -> bool:
    return (
        needle in article.title.lower()
        or needle in article.description.lower()
        or any(needle in tag.lower() for tag in article.tags)
    )


def filter_articles(
    articles: Iterable[Article],
    *,
    query: str = "",
    category: str = ALL,
    tag: str = ALL,
) -> List[Article]:
    """Return the articles matching every active predicate, in input order.

    - ``query``: case-insensitive substring of title, description or any tag;
      an empty query matches everything
    - ``category``: exact, case-sensitive match unless ``"all"``
    - ``tag``: exact membership in ``Article.tags`` unless ``"all"``
    """
    needle = query.lower()
    result: List[Article] = []
    for art in articles:
        if query and not _matches_query(art, needle):
            continue
        if category != ALL and art.category != category:
            continue
        if tag != ALL and tag not in art.tags:
            continue
        result.append(art)
    return result


def has_active_filters(*, query: str = "", category: str = ALL, tag: str = ALL) -> bool:
    return query != "" or category != ALL or tag != ALL


def available_categories(articles: Iterable[Article]) -> List[str]:
    # dedupe while preserving order
    return list(dict.fromkeys(a.category for a in articles))


def available_tags(articles: Iterable[Article]) -> List[str]:
    return list(dict.fromkeys(t for a in articles for t in a.tags))


def category_counts(articles: Iterable[Article]) -> Dict[str, int]:
    """Count articles per category, ordered by first appearance."""
    counts: Dict[str, int] = {}
    for art in articles:
        counts[art.category] = counts.get(art.category, 0) + 1
    return counts
