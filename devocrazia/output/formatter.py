from __future__ import annotations

from datetime import date
from html import escape
from urllib.parse import quote
from typing import Dict, List

from ..listing import SORT_LABELS, NavItem, Page, PaginationModel
from ..models import Article
from ..render.highlight import highlight_css
from ..render.text import wrap
from ..views import LISTING_PATH, ListingPage

NO_RESULTS_MESSAGE = "No articles found matching your criteria."


def format_short_date(value: date) -> str:
    """Card date, e.g. ``Oct 26, 2023``."""
    return value.strftime("%b %d, %Y")


def format_long_date(value: date) -> str:
    """Detail header date, e.g. ``October 6, 2023`` (no zero padding)."""
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def category_link(category: str) -> str:
    return f"{LISTING_PATH}?category={quote(category, safe='')}"


def article_link(article: Article) -> str:
    return f"{LISTING_PATH}/{article.slug}"


def format_results_line(page: Page) -> str:
    return f"Showing {page.first_index} to {page.last_index} of {page.total_items} results"


def format_card(article: Article) -> str:
    tags = ", ".join(article.tags)
    lines = [
        f"[{article.category}] {article.title}",
        wrap(article.description, width=78),
        f"{format_short_date(article.date)} · {article.read_time} min read",
    ]
    if tags:
        lines.append(f"Tags: {tags}")
    lines.append(article_link(article))
    return "\n".join(lines)


def _nav_label(item: NavItem) -> str:
    if item.kind == "ellipsis":
        return "..."
    return f"[{item.number}]" if item.active else str(item.number)


def format_pagination(pagination: PaginationModel) -> str:
    prev = "< Previous" if pagination.has_previous else "(Previous)"
    nxt = "Next >" if pagination.has_next else "(Next)"
    return " ".join([prev, *(_nav_label(i) for i in pagination.items), nxt])


def format_listing(listing: ListingPage) -> str:
    out: List[str] = [f"Sort: {SORT_LABELS[listing.sort]}"]
    if listing.has_active_filters:
        badges = " ".join(f"[{b}]" for b in listing.active_filters)
        out.append(f"Active Filter: {badges}".rstrip())

    out.append("")
    if listing.is_empty:
        out.append(NO_RESULTS_MESSAGE)
    else:
        out.append("\n\n".join(format_card(a) for a in listing.articles))

    if listing.pagination.visible:
        out.extend(["", format_pagination(listing.pagination)])
    if listing.total_results:
        out.extend(["", format_results_line(listing.page)])
    return "\n".join(out) + "\n"


def format_categories(counts: Dict[str, int]) -> str:
    width = max((len(c) for c in counts), default=0)
    return "\n".join(f"{cat.ljust(width)}  {n}  {category_link(cat)}" for cat, n in counts.items()) + "\n"


def format_detail_header(article: Article) -> str:
    return (
        f"[{article.category}]  {category_link(article.category)}\n"
        f"{article.title}\n"
        f"{article.author_name} · {format_long_date(article.date)} · {article.read_time} min read\n"
    )


def format_not_found(slug: str) -> str:
    return f"Article Not Found: {slug}\nBack to Articles: {LISTING_PATH}\n"


def format_detail_html(article: Article, body_html: str, *, include_styles: bool = True) -> str:
    """Standalone article fragment: header, highlighted body and token styles."""
    style = f"<style>\n{highlight_css()}\n</style>\n" if include_styles else ""
    tags = "".join(f'<span class="tag">{escape(t)}</span>' for t in article.tags)
    return (
        f"{style}"
        f'<article class="article" data-slug="{escape(article.slug)}">\n'
        f"<header>"
        f'<a class="category" href="{escape(category_link(article.category))}">{escape(article.category)}</a>'
        f'<h1 class="text-4xl font-bold mb-4">{escape(article.title)}</h1>'
        f'<p class="meta">{escape(article.author_name)} · '
        f'<time datetime="{article.date.isoformat()}">{format_long_date(article.date)}</time> · '
        f"{article.read_time} min read</p>"
        f'<div class="tags">{tags}</div>'
        f"</header>\n"
        f'<div class="prose">\n{body_html}\n</div>\n'
        f"</article>\n"
    )
