from __future__ import annotations

from typing import Dict, Iterable, Iterator, Optional, Tuple

from .article import Article


class ArticleCatalog:
    """Immutable, ordered collection of articles with slug lookup.

    The catalog is built once at startup. Every listing or detail view reads
    from it and never writes back.
    """

    __slots__ = ("_articles", "_by_slug")

    def __init__(self, articles: Iterable[Article]) -> None:
        self._articles: Tuple[Article, ...] = tuple(articles)
        self._by_slug: Dict[str, Article] = {a.slug: a for a in self._articles}

    def __iter__(self) -> Iterator[Article]:
        return iter(self._articles)

    def __len__(self) -> int:
        return len(self._articles)

    def __contains__(self, slug: object) -> bool:
        return slug in self._by_slug

    @property
    def articles(self) -> Tuple[Article, ...]:
        return self._articles

    def find_by_slug(self, slug: str) -> Optional[Article]:
        return self._by_slug.get(slug)
