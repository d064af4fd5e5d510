"""Render the block tree to an HTML fragment.

Each node kind maps to one render function in ``_BLOCK_RENDERERS`` or
``_INLINE_RENDERERS``; the visual overrides (classes, link attributes, code
block chrome) live in those functions.
"""

from __future__ import annotations

from html import escape
from typing import Callable, Dict, Mapping, Optional, Tuple
from urllib.parse import urlparse

from .blocks import (
    Block,
    Blockquote,
    CodeBlock,
    CodeSpan,
    Emphasis,
    Heading,
    Image,
    Inline,
    LineBreak,
    Link,
    ListBlock,
    ListItem,
    Paragraph,
    Strikethrough,
    Strong,
    Table,
    Text,
    ThematicBreak,
)
from .highlight import highlight_html

HEADING_CLASSES = {
    1: "text-3xl font-bold mt-8 mb-4 text-foreground",
    2: "text-2xl font-bold mt-8 mb-4 text-foreground",
    3: "text-xl font-bold mt-6 mb-3 text-foreground",
}
PARAGRAPH_CLASS = "mb-4 text-foreground leading-relaxed"
BLOCKQUOTE_CLASS = "border-l-4 border-primary pl-4 italic my-6 text-muted-foreground"
UL_CLASS = "list-disc list-inside mb-4 space-y-2 text-foreground"
OL_CLASS = "list-decimal list-inside mb-4 space-y-2 text-foreground"
LI_CLASS = "text-foreground"
LINK_CLASS = "text-primary hover:underline"
INLINE_CODE_CLASS = "inline-code px-1.5 py-0.5 rounded bg-muted text-foreground font-mono text-sm"
PRE_CLASS = "bg-muted rounded-lg p-4 overflow-x-auto mb-6 border border-border"

COPY_LABELS = {"idle": "Copy", "copied": "Copied"}
SAFE_URL_SCHEMES = frozenset({"http", "https", "mailto"})


class _Context:
    """Per-render state: running code block index and the widgets' copy states."""

    def __init__(self, copy_states: Mapping[int, str]) -> None:
        self.copy_states = copy_states
        self.code_index = 0


# ---------------- Inline -----------------


def _inline_text(node: Text, ctx: _Context) -> str:
    return escape(node.value, quote=False)


def _inline_code(node: CodeSpan, ctx: _Context) -> str:
    return f'<code class="{INLINE_CODE_CLASS}">{escape(node.value, quote=False)}</code>'


def _inline_emphasis(node: Emphasis, ctx: _Context) -> str:
    return f"<em>{render_inlines(node.children, ctx)}</em>"


def _inline_strong(node: Strong, ctx: _Context) -> str:
    return f"<strong>{render_inlines(node.children, ctx)}</strong>"


def _inline_strike(node: Strikethrough, ctx: _Context) -> str:
    return f"<del>{render_inlines(node.children, ctx)}</del>"


def safe_url(url: str) -> str:
    """Return ``url`` if it is relative or uses an allowed scheme, else ``""``."""
    # Browsers ignore whitespace and control characters inside a scheme
    compact = "".join(ch for ch in url if ch > " " and ch != "\x7f")
    scheme = urlparse(compact).scheme.lower()
    if not scheme or scheme in SAFE_URL_SCHEMES:
        return url
    return ""


def _inline_link(node: Link, ctx: _Context) -> str:
    # Always a new browsing context, without opener or referrer
    title = f' title="{escape(node.title)}"' if node.title else ""
    return (
        f'<a href="{escape(safe_url(node.href))}" class="{LINK_CLASS}" target="_blank" '
        f'rel="noopener noreferrer"{title}>{render_inlines(node.children, ctx)}</a>'
    )


def _inline_image(node: Image, ctx: _Context) -> str:
    title = f' title="{escape(node.title)}"' if node.title else ""
    return f'<img src="{escape(safe_url(node.src))}" alt="{escape(node.alt)}"{title} loading="lazy" />'


def _inline_break(node: LineBreak, ctx: _Context) -> str:
    return "<br />\n"


_INLINE_RENDERERS: Dict[str, Callable[..., str]] = {
    "text": _inline_text,
    "code_span": _inline_code,
    "emphasis": _inline_emphasis,
    "strong": _inline_strong,
    "strikethrough": _inline_strike,
    "link": _inline_link,
    "image": _inline_image,
    "line_break": _inline_break,
}


def render_inlines(nodes: Tuple[Inline, ...], ctx: Optional[_Context] = None) -> str:
    ctx = ctx or _Context({})
    return "".join(_INLINE_RENDERERS[n.kind](n, ctx) for n in nodes)


# ---------------- Blocks -----------------


def _block_heading(node: Heading, ctx: _Context) -> str:
    cls = HEADING_CLASSES.get(node.level)
    attr = f' class="{cls}"' if cls else ""
    return f"<h{node.level}{attr}>{render_inlines(node.children, ctx)}</h{node.level}>"


def _block_paragraph(node: Paragraph, ctx: _Context) -> str:
    return f'<p class="{PARAGRAPH_CLASS}">{render_inlines(node.children, ctx)}</p>'


def _block_code(node: CodeBlock, ctx: _Context) -> str:
    index = ctx.code_index
    ctx.code_index += 1
    state = ctx.copy_states.get(index, "idle")
    lang_cls = f" language-{escape(node.language)}" if node.language else ""
    return (
        f'<div class="code-block relative group" data-code-index="{index}">'
        f'<button type="button" class="copy-button" data-state="{state}" '
        f'aria-label="Copy code">{COPY_LABELS.get(state, "Copy")}</button>'
        f'<pre class="{PRE_CLASS}"><code class="hljs{lang_cls}">'
        f"{highlight_html(node.text, node.language)}</code></pre></div>"
    )


def _block_quote(node: Blockquote, ctx: _Context) -> str:
    return f'<blockquote class="{BLOCKQUOTE_CLASS}">{_render_all(node.children, ctx)}</blockquote>'


def _list_item(node: ListItem, ctx: _Context, *, tight: bool) -> str:
    parts = []
    for child in node.children:
        if tight and isinstance(child, Paragraph):
            parts.append(render_inlines(child.children, ctx))
        else:
            parts.append(_render_block(child, ctx))
    return f'<li class="{LI_CLASS}">{"".join(parts)}</li>'


def _block_list(node: ListBlock, ctx: _Context) -> str:
    items = "".join(_list_item(item, ctx, tight=node.tight) for item in node.items)
    if node.ordered:
        start = f' start="{node.start}"' if node.start != 1 else ""
        return f'<ol class="{OL_CLASS}"{start}>{items}</ol>'
    return f'<ul class="{UL_CLASS}">{items}</ul>'


def _block_list_item(node: ListItem, ctx: _Context) -> str:
    return _list_item(node, ctx, tight=False)


def _cell(tag: str, cell: Tuple[Inline, ...], align: Optional[str], ctx: _Context) -> str:
    style = f' style="text-align: {align}"' if align else ""
    return f"<{tag}{style}>{render_inlines(cell, ctx)}</{tag}>"


def _block_table(node: Table, ctx: _Context) -> str:
    aligns = node.alignments
    head = "".join(_cell("th", c, aligns[i], ctx) for i, c in enumerate(node.header))
    body = "".join(
        "<tr>" + "".join(_cell("td", c, aligns[i], ctx) for i, c in enumerate(row)) + "</tr>"
        for row in node.rows
    )
    tbody = f"<tbody>{body}</tbody>" if body else ""
    return f'<table class="w-full mb-6"><thead><tr>{head}</tr></thead>{tbody}</table>'


def _block_break(node: ThematicBreak, ctx: _Context) -> str:
    return '<hr class="my-8 border-border" />'


_BLOCK_RENDERERS: Dict[str, Callable[..., str]] = {
    "heading": _block_heading,
    "paragraph": _block_paragraph,
    "code": _block_code,
    "blockquote": _block_quote,
    "list": _block_list,
    "list_item": _block_list_item,
    "table": _block_table,
    "thematic_break": _block_break,
}


def _render_block(block: Block, ctx: _Context) -> str:
    return _BLOCK_RENDERERS[block.kind](block, ctx)


def _render_all(blocks: Tuple[Block, ...], ctx: _Context) -> str:
    return "\n".join(_render_block(b, ctx) for b in blocks)


def render_html(blocks: Tuple[Block, ...], *, copy_states: Optional[Mapping[int, str]] = None) -> str:
    """Render blocks to an HTML fragment.

    ``copy_states`` maps a code block's document-order index to its widget
    state (``"idle"`` or ``"copied"``) so the copy button label follows it.
    """
    return _render_all(blocks, _Context(copy_states or {}))
