from __future__ import annotations

import re
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, List, Set

import yaml

from ..models import Article, ArticleCatalog
from .logging import get_logger

logger = get_logger("dv.utils.catalog_loader")


class CatalogError(Exception):
    """Raised when the article catalog file is invalid or missing required fields."""


REQUIRED_FIELDS = {"id", "slug", "category", "title", "description", "date", "read_time"}

_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def _parse_date(value: object, *, slug: str) -> date:
    # YAML already turns unquoted ISO dates into date objects
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise CatalogError(f"Invalid date '{value}' for article '{slug}'") from exc


def _validate_article_dict(entry: dict) -> None:
    """Validate a single article mapping from YAML.

    Required fields: id (int), slug (lowercase, hyphen separated), category,
    title, description, date (YYYY-MM-DD), read_time (positive int).
    Optional fields:
      - tags: list[str]
      - category_color, image, hero_image, author_name, author_avatar: str
    """
    missing = REQUIRED_FIELDS - set(entry)
    if missing:
        raise CatalogError(f"Missing required fields: {sorted(missing)} in {entry}")

    if not isinstance(entry["id"], int) or isinstance(entry["id"], bool):
        raise CatalogError(f"'id' must be an integer, got {entry['id']!r}")

    slug = str(entry["slug"]).strip()
    if not _SLUG_RE.match(slug):
        raise CatalogError(f"Invalid slug '{slug}'. Use lowercase letters, digits and hyphens.")

    read_time = entry["read_time"]
    if not isinstance(read_time, int) or isinstance(read_time, bool) or read_time <= 0:
        raise CatalogError(f"'read_time' must be a positive integer for article '{slug}'")

    if "tags" in entry and entry["tags"] is not None:
        tags = entry["tags"]
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise CatalogError(f"'tags' must be a list of strings for article '{slug}'")


def _coerce_article(entry: dict) -> Article:
    slug = str(entry["slug"]).strip()
    return Article(
        id=entry["id"],
        slug=slug,
        category=str(entry["category"]).strip(),
        category_color=str(entry.get("category_color") or "").strip(),
        title=str(entry["title"]).strip(),
        description=str(entry["description"]).strip(),
        author_name=str(entry.get("author_name") or "").strip(),
        date=_parse_date(entry["date"], slug=slug),
        image=str(entry.get("image") or "").strip(),
        read_time=entry["read_time"],
        tags=tuple(str(t).strip() for t in entry.get("tags") or []),
        hero_image=entry.get("hero_image") or None,
        author_avatar=entry.get("author_avatar") or None,
    )


def build_catalog(entries: Iterable[dict]) -> ArticleCatalog:
    """Validate raw article mappings and build the immutable catalog.

    Slugs and ids must be unique across the whole catalog.
    """
    articles: List[Article] = []
    seen_ids: Set[int] = set()
    seen_slugs: Set[str] = set()
    for item in entries:
        if not isinstance(item, dict):
            raise CatalogError(f"Each article must be a mapping, got: {type(item)}")
        _validate_article_dict(item)
        article = _coerce_article(item)
        if article.id in seen_ids:
            raise CatalogError(f"Duplicate article id {article.id} ('{article.slug}')")
        if article.slug in seen_slugs:
            raise CatalogError(f"Duplicate article slug '{article.slug}'")
        seen_ids.add(article.id)
        seen_slugs.add(article.slug)
        articles.append(article)
    return ArticleCatalog(articles)


def load_catalog(path: Path | str) -> ArticleCatalog:
    """Load ``articles.yaml`` into an ``ArticleCatalog``.

    YAML structure:
      - Top-level mapping
      - Key ``articles``: list of article mappings (see ``_validate_article_dict``)

    Unknown top-level keys are ignored.
    """
    catalog_path = Path(path)
    if not catalog_path.exists():
        raise CatalogError(f"Catalog file not found: {catalog_path}")

    with catalog_path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise CatalogError(f"Catalog file is not valid YAML: {catalog_path} ({exc})") from exc

    if not isinstance(data, dict):
        raise CatalogError("Catalog must be a mapping with an 'articles' list")

    raw = data.get("articles") or []
    if not isinstance(raw, list):
        raise CatalogError("'articles' must be a list in the catalog file")

    catalog = build_catalog(raw)
    logger.debug("Loaded %d article(s) from %s", len(catalog), catalog_path)
    return catalog
