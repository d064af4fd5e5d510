"""Command line entrypoint for the Devocrazia article site.

This script drives the two site views from the terminal:
1) load configuration and the article catalog
2) print a filtered, sorted, paginated listing page
3) or fetch and render a single article (to the terminal or an HTML file)
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .fetchers import ContentFetcher
from .listing import ALL, SORT_LABELS, category_counts
from .models import ArticleCatalog
from .output.formatter import (
    format_categories,
    format_detail_header,
    format_detail_html,
    format_listing,
    format_not_found,
)
from .render import render_text
from .utils.catalog_loader import CatalogError, load_catalog
from .utils.logging import configure_logging, get_logger
from .utils.site_config import SiteConfig
from .views import ArticleDetailView, ListingView

EXIT_OK = 0
EXIT_CATALOG_ERROR = 1
EXIT_NOT_FOUND = 2


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Devocrazia – browse and read articles from the terminal"
    )
    parser.add_argument(
        "--catalog",
        default=None,
        help="Path to the article catalog (YAML); defaults to the bundled catalog",
    )
    parser.add_argument(
        "--content-base",
        default=None,
        help="Base URL or directory holding {slug}.md article bodies",
    )
    parser.add_argument("--query", default="", help="Case-insensitive search over title, description and tags")
    parser.add_argument("--category", default=ALL, help="Exact category to show, or 'all'")
    parser.add_argument("--tag", default=ALL, help="Tag that listed articles must carry, or 'all'")
    parser.add_argument(
        "--sort",
        default="recent",
        choices=list(SORT_LABELS),
        help="Listing order",
    )
    parser.add_argument("--page", type=int, default=1, help="1-based listing page")
    parser.add_argument("--page-size", type=int, default=None, help="Articles per listing page")
    parser.add_argument("--article", metavar="SLUG", default=None, help="Show a single article by slug")
    parser.add_argument(
        "--html",
        metavar="OUT",
        default=None,
        help="With --article, write the rendered article as an HTML fragment to OUT",
    )
    parser.add_argument(
        "--color",
        action="store_true",
        help="Highlight code blocks in terminal output",
    )
    parser.add_argument(
        "--categories",
        action="store_true",
        help="List categories with their article counts and exit",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity (default: LOG_LEVEL from the environment)",
    )
    return parser.parse_args(argv)


async def _show_article(args: argparse.Namespace, config: SiteConfig, catalog: ArticleCatalog) -> int:
    logger = get_logger("dv.cli")
    async with ContentFetcher(config.content_base, timeout=config.fetch_timeout) as fetcher:
        view = ArticleDetailView(catalog, fetcher, reset_delay=config.copy_reset_seconds)
        state = await view.show(args.article)
        try:
            if state == "not_found" or view.article is None:
                sys.stdout.write(format_not_found(args.article))
                return EXIT_NOT_FOUND

            if args.html:
                out_path = Path(args.html)
                out_path.parent.mkdir(parents=True, exist_ok=True)
                out_path.write_text(format_detail_html(view.article, view.render_html()), encoding="utf-8")
                logger.info("Wrote %s to %s", view.article.slug, out_path)
            else:
                sys.stdout.write(format_detail_header(view.article))
                sys.stdout.write("\n")
                sys.stdout.write(render_text(view.blocks, color=args.color))
            return EXIT_OK
        finally:
            view.close()


def _show_listing(args: argparse.Namespace, config: SiteConfig, catalog: ArticleCatalog) -> int:
    view = ListingView(
        catalog,
        page_size=args.page_size or config.page_size,
        query=args.query,
        category=args.category,
        tag=args.tag,
        sort=args.sort,
    )
    if args.page != 1:
        view.go_to(args.page)
    sys.stdout.write(format_listing(view.render()))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv(override=False)
    args = parse_args(argv)
    configure_logging(level=args.log_level)
    logger = get_logger("dv.cli")

    config = SiteConfig.from_env()
    if args.content_base:
        config.content_base = args.content_base
    catalog_path = Path(args.catalog or config.catalog_path)

    logger.debug("Loading catalog from %s", catalog_path)
    try:
        catalog = load_catalog(catalog_path)
    except CatalogError as exc:
        logger.error("Failed to load catalog: %s", exc)
        return EXIT_CATALOG_ERROR
    except Exception as exc:  # noqa: BLE001 - top-level entrypoint guard
        logger.exception("Failed to load catalog: %s", exc)
        return EXIT_CATALOG_ERROR
    logger.debug("Loaded %d article(s)", len(catalog))

    if args.categories:
        sys.stdout.write(format_categories(category_counts(catalog)))
        return EXIT_OK

    if args.article:
        return asyncio.run(_show_article(args, config, catalog))

    return _show_listing(args, config, catalog)


if __name__ == "__main__":  # pragma: no cover - script entrypoint
    raise SystemExit(main())
