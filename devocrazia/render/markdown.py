"""Markdown to typed block tree.

Supports the common block grammar (ATX and setext headings, fenced and
indented code, nested block quotes and lists, thematic breaks, paragraphs,
link reference definitions) plus GFM pipe tables. Raw HTML blocks are
reduced to their text content.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from ..processors.normalize import clean_html_to_text
from .blocks import (
    Alignment,
    Block,
    Blockquote,
    CodeBlock,
    Heading,
    ListBlock,
    ListItem,
    Paragraph,
    Table,
    ThematicBreak,
)
from .inline import normalize_label, parse_inline

_ATX_RE = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$")
_SETEXT_RE = re.compile(r"^ {0,3}(=+|-+)[ \t]*$")
_THEMATIC_RE = re.compile(r"^ {0,3}(?:(?:\*[ \t]*){3,}|(?:-[ \t]*){3,}|(?:_[ \t]*){3,})$")
_FENCE_RE = re.compile(r"^( {0,3})(`{3,}|~{3,})[ \t]*(.*?)[ \t]*$")
_BLOCKQUOTE_RE = re.compile(r"^ {0,3}> ?")
_LIST_ITEM_RE = re.compile(r"^( {0,3})([-+*]|\d{1,9}[.)])([ \t]+|$)")
_HTML_BLOCK_RE = re.compile(r"^ {0,3}(?:<[A-Za-z][A-Za-z0-9-]*(?:[ \t]|/?>|$)|</[A-Za-z][A-Za-z0-9-]*[ \t]*>|<!--)")
_LINK_DEF_RE = re.compile(
    r'^ {0,3}\[([^\]]+)\]:[ \t]*<?([^\s>]+)>?(?:[ \t]+(?:"([^"]*)"|\'([^\']*)\'|\(([^)]*)\)))?[ \t]*$'
)
_TABLE_DIVIDER_CELL_RE = re.compile(r"^:?-+:?$")

_INDENT = "    "


def _is_blank(line: str) -> bool:
    return not line.strip()


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


# ---------------- Tables -----------------


def _split_row(line: str) -> List[str]:
    row = line.strip()
    if row.startswith("|"):
        row = row[1:]
    if row.endswith("|") and not row.endswith("\\|"):
        row = row[:-1]
    cells: List[str] = []
    current: List[str] = []
    i = 0
    while i < len(row):
        ch = row[i]
        if ch == "\\" and i + 1 < len(row) and row[i + 1] == "|":
            current.append("|")
            i += 2
            continue
        if ch == "|":
            cells.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
        i += 1
    cells.append("".join(current).strip())
    return cells


def _parse_alignments(line: str) -> Optional[List[Alignment]]:
    if "-" not in line:
        return None
    cells = _split_row(line)
    aligns: List[Alignment] = []
    for cell in cells:
        if not _TABLE_DIVIDER_CELL_RE.match(cell):
            return None
        left, right = cell.startswith(":"), cell.endswith(":")
        if left and right:
            aligns.append("center")
        elif right:
            aligns.append("right")
        elif left:
            aligns.append("left")
        else:
            aligns.append(None)
    return aligns


def _table_start(lines: List[str], i: int) -> Optional[List[Alignment]]:
    if i + 1 >= len(lines) or "|" not in lines[i]:
        return None
    aligns = _parse_alignments(lines[i + 1])
    if aligns is None or len(_split_row(lines[i])) != len(aligns):
        return None
    return aligns


# ---------------- Block parser -----------------


class _BlockParser:
    def __init__(self, refs: Dict[str, Tuple[str, Optional[str]]]) -> None:
        self.refs = refs

    def inline(self, text: str):
        return parse_inline(text, self.refs)

    def _starts_block(self, line: str, *, in_paragraph: bool) -> bool:
        """Whether ``line`` opens a block that interrupts a paragraph."""
        if _is_blank(line):
            return True
        if _ATX_RE.match(line) or _THEMATIC_RE.match(line) or _FENCE_RE.match(line):
            return True
        if _BLOCKQUOTE_RE.match(line) or _HTML_BLOCK_RE.match(line):
            return True
        m = _LIST_ITEM_RE.match(line)
        if m:
            # An empty item, or an ordered list not starting at 1, cannot interrupt a paragraph
            rest = line[m.end():]
            if in_paragraph and not rest.strip():
                return False
            marker = m.group(2)
            if in_paragraph and marker[0].isdigit() and int(marker[:-1]) != 1:
                return False
            return True
        return False

    def parse(self, lines: List[str]) -> List[Block]:
        blocks: List[Block] = []
        i = 0
        while i < len(lines):
            line = lines[i]
            if _is_blank(line):
                i += 1
                continue

            fence = _FENCE_RE.match(line)
            if fence and not (fence.group(2)[0] == "`" and "`" in fence.group(3)):
                block, i = self._fenced_code(lines, i, fence)
                blocks.append(block)
                continue

            if line.startswith(_INDENT):
                block, i = self._indented_code(lines, i)
                blocks.append(block)
                continue

            atx = _ATX_RE.match(line)
            if atx:
                level = len(atx.group(1))
                blocks.append(Heading(level=level, children=self.inline(atx.group(2) or "")))
                i += 1
                continue

            if _THEMATIC_RE.match(line):
                blocks.append(ThematicBreak())
                i += 1
                continue

            if _BLOCKQUOTE_RE.match(line):
                block, i = self._blockquote(lines, i)
                blocks.append(block)
                continue

            if _LIST_ITEM_RE.match(line):
                block, i = self._list(lines, i)
                blocks.append(block)
                continue

            if _HTML_BLOCK_RE.match(line):
                raw: List[str] = []
                while i < len(lines) and not _is_blank(lines[i]):
                    raw.append(lines[i])
                    i += 1
                text = clean_html_to_text("\n".join(raw))
                if text:
                    blocks.append(Paragraph(children=self.inline(text)))
                continue

            aligns = _table_start(lines, i)
            if aligns is not None:
                block, i = self._table(lines, i, aligns)
                blocks.append(block)
                continue

            block, i = self._paragraph(lines, i)
            if block is not None:
                blocks.append(block)
        return blocks

    # ---------------- Leaf blocks -----------------
    def _fenced_code(self, lines: List[str], i: int, fence: re.Match) -> Tuple[CodeBlock, int]:
        indent = len(fence.group(1))
        marker = fence.group(2)
        info = fence.group(3).strip()
        language = info.split()[0] if info else None
        body: List[str] = []
        i += 1
        while i < len(lines):
            current = lines[i]
            stripped = current.strip()
            if _indent_of(current) < 4 and stripped.startswith(marker[0] * len(marker)) and not stripped.strip(marker[0]):
                i += 1
                break
            # Remove up to the opening fence's indentation
            strip = min(indent, _indent_of(current))
            body.append(current[strip:])
            i += 1
        return CodeBlock(text="\n".join(body), language=language), i

    def _indented_code(self, lines: List[str], i: int) -> Tuple[CodeBlock, int]:
        body: List[str] = []
        while i < len(lines) and (lines[i].startswith(_INDENT) or _is_blank(lines[i])):
            body.append(lines[i][4:] if lines[i].startswith(_INDENT) else "")
            i += 1
        while body and not body[-1].strip():
            body.pop()
        return CodeBlock(text="\n".join(body)), i

    def _paragraph(self, lines: List[str], i: int) -> Tuple[Optional[Block], int]:
        para: List[str] = [lines[i]]
        i += 1
        while i < len(lines):
            line = lines[i]
            setext = _SETEXT_RE.match(line)
            if setext:
                level = 1 if setext.group(1)[0] == "=" else 2
                return Heading(level=level, children=self.inline("\n".join(para))), i + 1
            if self._starts_block(line, in_paragraph=True):
                break
            if _table_start(lines, i) is not None:
                break
            para.append(line)
            i += 1
        return Paragraph(children=self.inline("\n".join(para))), i

    def _table(self, lines: List[str], i: int, aligns: List[Alignment]) -> Tuple[Table, int]:
        width = len(aligns)

        def _cells(line: str):
            cells = _split_row(line)
            cells = (cells + [""] * width)[:width]
            return tuple(self.inline(c) for c in cells)

        header = _cells(lines[i])
        rows = []
        i += 2
        while i < len(lines):
            line = lines[i]
            if _is_blank(line) or self._starts_block(line, in_paragraph=False):
                break
            rows.append(_cells(line))
            i += 1
        return Table(header=header, rows=tuple(rows), alignments=tuple(aligns)), i

    # ---------------- Container blocks -----------------
    def _blockquote(self, lines: List[str], i: int) -> Tuple[Blockquote, int]:
        inner: List[str] = []
        while i < len(lines):
            line = lines[i]
            m = _BLOCKQUOTE_RE.match(line)
            if m:
                inner.append(line[m.end():])
                i += 1
                continue
            # Lazy continuation of a paragraph inside the quote
            if (
                not _is_blank(line)
                and inner
                and not _is_blank(inner[-1])
                and not self._starts_block(line, in_paragraph=True)
            ):
                inner.append(line)
                i += 1
                continue
            break
        return Blockquote(children=tuple(self.parse(inner))), i

    def _list(self, lines: List[str], i: int) -> Tuple[ListBlock, int]:
        first = _LIST_ITEM_RE.match(lines[i])
        assert first is not None
        marker = first.group(2)
        ordered = marker[0].isdigit()
        delimiter = marker[-1]
        start = int(marker[:-1]) if ordered else 1

        items: List[ListItem] = []
        tight = True
        saw_blank_between = False
        while i < len(lines):
            m = _LIST_ITEM_RE.match(lines[i])
            if not m:
                break
            this_marker = m.group(2)
            if this_marker[0].isdigit() != ordered or this_marker[-1] != delimiter:
                break
            if _THEMATIC_RE.match(lines[i]):
                break
            if saw_blank_between:
                tight = False
            item_lines, i, ended_blank = self._list_item(lines, i, m)
            children = self.parse(item_lines)
            if len(children) > 1 and _has_inner_blank(item_lines):
                tight = False
            items.append(ListItem(children=tuple(children)))
            saw_blank_between = ended_blank
        return ListBlock(items=tuple(items), ordered=ordered, start=start, tight=tight), i

    def _list_item(self, lines: List[str], i: int, m: re.Match) -> Tuple[List[str], int, bool]:
        line = lines[i]
        spacing = m.group(3)
        content_indent = len(m.group(1)) + len(m.group(2))
        rest = line[m.end():]
        if len(spacing) > 4 or not rest.strip():
            # Too much spacing means indented code starts the item; use a single space
            content_indent += 1
            rest = (" " * (len(spacing) - 1) + rest) if rest.strip() else ""
        else:
            content_indent += len(spacing)

        item_lines: List[str] = [rest]
        i += 1
        pending_blank = 0
        while i < len(lines):
            current = lines[i]
            if _is_blank(current):
                pending_blank += 1
                i += 1
                continue
            if _indent_of(current) >= content_indent:
                item_lines.extend([""] * pending_blank)
                pending_blank = 0
                item_lines.append(current[content_indent:])
                i += 1
                continue
            if _LIST_ITEM_RE.match(current):
                # A sibling item (or a new list) at a shallower indent
                break
            if pending_blank == 0 and not self._starts_block(current, in_paragraph=True):
                # Lazy paragraph continuation
                if item_lines and not _is_blank(item_lines[-1]):
                    item_lines.append(current.strip())
                    i += 1
                    continue
            break
        # Blank lines before the next sibling belong to the list, not the item
        return item_lines, i, pending_blank > 0 and i < len(lines)


def _has_inner_blank(item_lines: List[str]) -> bool:
    trimmed = list(item_lines)
    while trimmed and _is_blank(trimmed[-1]):
        trimmed.pop()
    in_fence = False
    for line in trimmed:
        if _FENCE_RE.match(line):
            in_fence = not in_fence
        elif not in_fence and _is_blank(line):
            return True
    return False


def _extract_link_definitions(lines: List[str]) -> Tuple[List[str], Dict[str, Tuple[str, Optional[str]]]]:
    refs: Dict[str, Tuple[str, Optional[str]]] = {}
    kept: List[str] = []
    in_fence = False
    for line in lines:
        if _FENCE_RE.match(line):
            in_fence = not in_fence
        m = None if in_fence else _LINK_DEF_RE.match(line)
        if m:
            label = normalize_label(m.group(1))
            title = next((g for g in m.groups()[2:] if g is not None), None)
            # First definition wins
            refs.setdefault(label, (m.group(2), title))
            continue
        kept.append(line)
    return kept, refs


def parse_document(text: str) -> Tuple[Block, ...]:
    """Parse markdown ``text`` into a tuple of blocks. Pure: same text, same blocks."""
    lines = [line.expandtabs(4).rstrip("\r") for line in text.replace("\r\n", "\n").split("\n")]
    lines, refs = _extract_link_definitions(lines)
    parser = _BlockParser(refs)
    return tuple(parser.parse(lines))


__all__ = ["parse_document"]
