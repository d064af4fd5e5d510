"""Typed document tree produced by the markdown parser.

Every node is a frozen dataclass with a ``kind`` discriminator, so renderers
dispatch on ``node.kind`` through a lookup table instead of subclass hooks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional, Tuple, Union

# ---------------- Inline nodes -----------------


@dataclass(frozen=True, slots=True)
class Text:
    value: str
    kind: Literal["text"] = "text"


@dataclass(frozen=True, slots=True)
class CodeSpan:
    value: str
    kind: Literal["code_span"] = "code_span"


@dataclass(frozen=True, slots=True)
class Emphasis:
    children: Tuple["Inline", ...]
    kind: Literal["emphasis"] = "emphasis"


@dataclass(frozen=True, slots=True)
class Strong:
    children: Tuple["Inline", ...]
    kind: Literal["strong"] = "strong"


@dataclass(frozen=True, slots=True)
class Strikethrough:
    children: Tuple["Inline", ...]
    kind: Literal["strikethrough"] = "strikethrough"


@dataclass(frozen=True, slots=True)
class Link:
    href: str
    children: Tuple["Inline", ...]
    title: Optional[str] = None
    kind: Literal["link"] = "link"


@dataclass(frozen=True, slots=True)
class Image:
    src: str
    alt: str
    title: Optional[str] = None
    kind: Literal["image"] = "image"


@dataclass(frozen=True, slots=True)
class LineBreak:
    kind: Literal["line_break"] = "line_break"


Inline = Union[Text, CodeSpan, Emphasis, Strong, Strikethrough, Link, Image, LineBreak]

# ---------------- Block nodes -----------------


@dataclass(frozen=True, slots=True)
class Heading:
    level: int
    children: Tuple[Inline, ...]
    kind: Literal["heading"] = "heading"


@dataclass(frozen=True, slots=True)
class Paragraph:
    children: Tuple[Inline, ...]
    kind: Literal["paragraph"] = "paragraph"


@dataclass(frozen=True, slots=True)
class CodeBlock:
    text: str
    language: Optional[str] = None
    kind: Literal["code"] = "code"


@dataclass(frozen=True, slots=True)
class Blockquote:
    children: Tuple["Block", ...]
    kind: Literal["blockquote"] = "blockquote"


@dataclass(frozen=True, slots=True)
class ListItem:
    children: Tuple["Block", ...]
    kind: Literal["list_item"] = "list_item"


@dataclass(frozen=True, slots=True)
class ListBlock:
    items: Tuple[ListItem, ...]
    ordered: bool = False
    start: int = 1
    tight: bool = True
    kind: Literal["list"] = "list"


Alignment = Optional[Literal["left", "center", "right"]]


@dataclass(frozen=True, slots=True)
class Table:
    header: Tuple[Tuple[Inline, ...], ...]
    rows: Tuple[Tuple[Tuple[Inline, ...], ...], ...] = field(default_factory=tuple)
    alignments: Tuple[Alignment, ...] = field(default_factory=tuple)
    kind: Literal["table"] = "table"


@dataclass(frozen=True, slots=True)
class ThematicBreak:
    kind: Literal["thematic_break"] = "thematic_break"


Block = Union[Heading, Paragraph, CodeBlock, Blockquote, ListBlock, ListItem, Table, ThematicBreak]
Node = Union[Block, Inline]


def flatten_text(node: Union[Node, Tuple[Node, ...]]) -> str:
    """Concatenate the text content of a node and everything nested in it."""
    if isinstance(node, tuple):
        return "".join(flatten_text(child) for child in node)
    if isinstance(node, (Text, CodeSpan)):
        return node.value
    if isinstance(node, CodeBlock):
        return node.text
    if isinstance(node, Image):
        return node.alt
    if isinstance(node, LineBreak):
        return "\n"
    if isinstance(node, ListBlock):
        return "\n".join(flatten_text(item) for item in node.items)
    if isinstance(node, Table):
        rows = (node.header,) + node.rows
        return "\n".join("\t".join(flatten_text(cell) for cell in row) for row in rows)
    if isinstance(node, (Blockquote, ListItem)):
        return "\n".join(flatten_text(child) for child in node.children)
    if isinstance(node, ThematicBreak):
        return ""
    return flatten_text(node.children)


def iter_code_blocks(blocks: Tuple[Block, ...]) -> Tuple[CodeBlock, ...]:
    """Code blocks in document order, including those nested in lists and quotes."""
    found = []
    for block in blocks:
        if isinstance(block, CodeBlock):
            found.append(block)
        elif isinstance(block, (Blockquote, ListItem)):
            found.extend(iter_code_blocks(block.children))
        elif isinstance(block, ListBlock):
            found.extend(iter_code_blocks(block.items))
    return tuple(found)
