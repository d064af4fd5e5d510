"""Plain terminal rendition of the block tree, used by the CLI."""

from __future__ import annotations

import textwrap
from typing import Callable, Dict, List, Tuple

from .blocks import (
    Block,
    Blockquote,
    CodeBlock,
    Heading,
    Inline,
    ListBlock,
    ListItem,
    Paragraph,
    Table,
    ThematicBreak,
    flatten_text,
)
from .highlight import highlight_terminal

RULE_WIDTH = 60


def _inline_text(nodes: Tuple[Inline, ...]) -> str:
    parts: List[str] = []
    for node in nodes:
        if node.kind == "code_span":
            parts.append(f"`{node.value}`")
        elif node.kind == "link":
            label = _inline_text(node.children)
            parts.append(label if label == node.href else f"{label} <{node.href}>")
        elif node.kind == "image":
            parts.append(f"[image: {node.alt or node.src}]")
        elif node.kind == "line_break":
            parts.append("\n")
        elif node.kind == "text":
            parts.append(node.value)
        else:
            parts.append(_inline_text(node.children))
    return "".join(parts)


def _heading(node: Heading, color: bool) -> List[str]:
    title = _inline_text(node.children)
    if node.level == 1:
        return [title.upper(), "=" * min(len(title), RULE_WIDTH)]
    if node.level == 2:
        return [title, "-" * min(len(title), RULE_WIDTH)]
    return ["#" * node.level + " " + title]


def _paragraph(node: Paragraph, color: bool) -> List[str]:
    return _inline_text(node.children).splitlines() or [""]


def _code(node: CodeBlock, color: bool) -> List[str]:
    body = highlight_terminal(node.text, node.language) if color else node.text.rstrip("\n")
    header = f"--- {node.language} ---" if node.language else "---"
    return [header] + ["    " + line for line in body.split("\n")] + ["---"]


def _blockquote(node: Blockquote, color: bool) -> List[str]:
    return ["> " + line if line else ">" for line in _render_lines(node.children, color)]


def _item_lines(item: ListItem, marker: str, color: bool, tight: bool = True) -> List[str]:
    lines = _render_lines(item.children, color, separator=not tight) or [""]
    pad = " " * len(marker)
    return [marker + lines[0]] + [pad + line if line else "" for line in lines[1:]]


def _list(node: ListBlock, color: bool) -> List[str]:
    lines: List[str] = []
    for offset, item in enumerate(node.items):
        marker = f"{node.start + offset}. " if node.ordered else "- "
        if lines and not node.tight:
            lines.append("")
        lines.extend(_item_lines(item, marker, color, node.tight))
    return lines


def _list_item(node: ListItem, color: bool) -> List[str]:
    return _item_lines(node, "- ", color)


def _table(node: Table, color: bool) -> List[str]:
    rows = [[flatten_text(c) for c in node.header]] + [[flatten_text(c) for c in row] for row in node.rows]
    widths = [max(len(row[i]) for row in rows) for i in range(len(node.header))]

    def fmt(row: List[str]) -> str:
        cells = []
        for i, value in enumerate(row):
            align = node.alignments[i]
            if align == "right":
                cells.append(value.rjust(widths[i]))
            elif align == "center":
                cells.append(value.center(widths[i]))
            else:
                cells.append(value.ljust(widths[i]))
        return "| " + " | ".join(cells) + " |"

    rule = "|" + "|".join("-" * (w + 2) for w in widths) + "|"
    return [fmt(rows[0]), rule] + [fmt(row) for row in rows[1:]]


def _thematic_break(node: ThematicBreak, color: bool) -> List[str]:
    return ["-" * RULE_WIDTH]


_RENDERERS: Dict[str, Callable[[Block, bool], List[str]]] = {
    "heading": _heading,
    "paragraph": _paragraph,
    "code": _code,
    "blockquote": _blockquote,
    "list": _list,
    "list_item": _list_item,
    "table": _table,
    "thematic_break": _thematic_break,
}


def _render_lines(blocks: Tuple[Block, ...], color: bool, separator: bool = True) -> List[str]:
    lines: List[str] = []
    for block in blocks:
        if lines and separator:
            lines.append("")
        lines.extend(_RENDERERS[block.kind](block, color))
    return lines


def render_text(blocks: Tuple[Block, ...], color: bool = False) -> str:
    """Render blocks as terminal text; ``color`` enables Pygments highlighting of code."""
    return "\n".join(_render_lines(blocks, color)) + "\n"


def wrap(text: str, width: int = 80) -> str:
    """Wrap a free-text line for card output."""
    return textwrap.fill(text, width=width)
