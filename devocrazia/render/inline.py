from __future__ import annotations

import re
import string
import unicodedata
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple, Union

from .blocks import (
    CodeSpan,
    Emphasis,
    Image,
    Inline,
    LineBreak,
    Link,
    Strikethrough,
    Strong,
    Text,
    flatten_text,
)

LinkRefs = Mapping[str, Tuple[str, Optional[str]]]

_ESCAPABLE = set(string.punctuation)
_DELIMITERS = "*_~"

_AUTOLINK_RE = re.compile(r"<([A-Za-z][A-Za-z0-9.+-]{1,31}:[^\s<>]*)>")
_EMAIL_AUTOLINK_RE = re.compile(r"<([A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)*)>")
_LINK_TITLE_RE = re.compile(r'\s+(?:"((?:[^"\\]|\\.)*)"|\'((?:[^\'\\]|\\.)*)\'|\(((?:[^()\\]|\\.)*)\))')
_ESCAPE_RE = re.compile(r"\\([!-/:-@\[-`{-~])")


@dataclass
class _Delim:
    char: str
    count: int
    orig_count: int
    can_open: bool
    can_close: bool


_Item = Union[Inline, _Delim]


def normalize_label(label: str) -> str:
    """Case-fold and collapse whitespace, as reference labels are matched."""
    return " ".join(label.split()).casefold()


def _unescape(value: str) -> str:
    return _ESCAPE_RE.sub(r"\1", value)


def _is_space(ch: str) -> bool:
    return ch == "" or ch.isspace()


def _is_punct(ch: str) -> bool:
    return ch != "" and (ch in _ESCAPABLE or unicodedata.category(ch).startswith("P"))


def _flanking(before: str, after: str) -> Tuple[bool, bool]:
    left = not _is_space(after) and (not _is_punct(after) or _is_space(before) or _is_punct(before))
    right = not _is_space(before) and (not _is_punct(before) or _is_space(after) or _is_punct(after))
    return left, right


class _InlineParser:
    def __init__(self, text: str, refs: LinkRefs, *, in_link: bool = False) -> None:
        self.text = text
        self.refs = refs
        self.in_link = in_link
        self.pos = 0
        self.items: List[_Item] = []
        self._buf: List[str] = []

    # ---------------- Buffer helpers -----------------
    def _flush(self) -> None:
        if self._buf:
            self.items.append(Text("".join(self._buf)))
            self._buf = []

    def _emit(self, node: _Item) -> None:
        self._flush()
        self.items.append(node)

    # ---------------- Scanner -----------------
    def parse(self) -> Tuple[Inline, ...]:
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch == "\\":
                self._backslash()
            elif ch == "`":
                self._code_span()
            elif ch == "\n":
                self._newline()
            elif ch in _DELIMITERS:
                self._delimiter_run()
            elif ch == "!" and text.startswith("![", self.pos):
                if not self._link_or_image(image=True):
                    self._buf.append("!")
                    self.pos += 1
            elif ch == "[" and not self.in_link:
                if not self._link_or_image(image=False):
                    self._buf.append("[")
                    self.pos += 1
            elif ch == "<":
                self._autolink()
            else:
                self._buf.append(ch)
                self.pos += 1
        self._flush()
        _process_emphasis(self.items)
        return _finalize(self.items)

    def _backslash(self) -> None:
        nxt = self.text[self.pos + 1 : self.pos + 2]
        if nxt == "\n":
            self._emit(LineBreak())
            self.pos += 2
        elif nxt in _ESCAPABLE and nxt:
            self._buf.append(nxt)
            self.pos += 2
        else:
            self._buf.append("\\")
            self.pos += 1

    def _code_span(self) -> None:
        text = self.text
        start = self.pos
        run_end = start
        while run_end < len(text) and text[run_end] == "`":
            run_end += 1
        ticks = text[start:run_end]
        search = run_end
        while True:
            close = text.find(ticks, search)
            if close == -1:
                # No matching run: the backticks are literal
                self._buf.append(ticks)
                self.pos = run_end
                return
            after = close + len(ticks)
            if after < len(text) and text[after] == "`":
                # Longer run; skip past it entirely
                while after < len(text) and text[after] == "`":
                    after += 1
                search = after
                continue
            break
        content = text[run_end:close].replace("\n", " ")
        if len(content) >= 2 and content[0] == " " and content[-1] == " " and content.strip(" "):
            content = content[1:-1]
        self._emit(CodeSpan(content))
        self.pos = close + len(ticks)

    def _newline(self) -> None:
        # Two or more trailing spaces before a newline make a hard break
        trailing = 0
        while self._buf and self._buf[-1] == " ":
            self._buf.pop()
            trailing += 1
        if trailing >= 2:
            self._emit(LineBreak())
        else:
            self._buf.append("\n")
        self.pos += 1
        # Leading spaces on the continuation line are not content
        while self.pos < len(self.text) and self.text[self.pos] == " ":
            self.pos += 1

    def _delimiter_run(self) -> None:
        text = self.text
        ch = text[self.pos]
        end = self.pos
        while end < len(text) and text[end] == ch:
            end += 1
        count = end - self.pos
        before = text[self.pos - 1] if self.pos > 0 else ""
        after = text[end] if end < len(text) else ""
        left, right = _flanking(before, after)
        if ch == "_":
            can_open = left and (not right or _is_punct(before))
            can_close = right and (not left or _is_punct(after))
        elif ch == "~":
            # Strikethrough takes one or two tildes only
            if count > 2:
                self._buf.append(ch * count)
                self.pos = end
                return
            can_open, can_close = left, right
        else:
            can_open, can_close = left, right
        self._emit(_Delim(char=ch, count=count, orig_count=count, can_open=can_open, can_close=can_close))
        self.pos = end

    def _autolink(self) -> None:
        m = _AUTOLINK_RE.match(self.text, self.pos)
        if m:
            url = m.group(1)
            self._emit(Link(href=url, children=(Text(url),)))
            self.pos = m.end()
            return
        m = _EMAIL_AUTOLINK_RE.match(self.text, self.pos)
        if m:
            email = m.group(1)
            self._emit(Link(href=f"mailto:{email}", children=(Text(email),)))
            self.pos = m.end()
            return
        self._buf.append("<")
        self.pos += 1

    # ---------------- Links and images -----------------
    def _matching_bracket(self, open_pos: int) -> int:
        text = self.text
        depth = 0
        i = open_pos
        while i < len(text):
            ch = text[i]
            if ch == "\\":
                i += 2
                continue
            if ch == "`":
                run_end = i
                while run_end < len(text) and text[run_end] == "`":
                    run_end += 1
                close = text.find(text[i:run_end], run_end)
                i = close + (run_end - i) if close != -1 else run_end
                continue
            if ch == "[":
                depth += 1
            elif ch == "]":
                depth -= 1
                if depth == 0:
                    return i
            i += 1
        return -1

    def _inline_destination(self, start: int) -> Optional[Tuple[str, Optional[str], int]]:
        """Parse ``(dest "title")`` starting at the opening parenthesis."""
        text = self.text
        i = start + 1
        while i < len(text) and text[i] in " \t\n":
            i += 1
        if i < len(text) and text[i] == "<":
            close = text.find(">", i + 1)
            if close == -1 or "\n" in text[i + 1 : close]:
                return None
            dest = text[i + 1 : close]
            i = close + 1
        else:
            depth = 0
            begin = i
            while i < len(text):
                ch = text[i]
                if ch == "\\" and i + 1 < len(text):
                    i += 2
                    continue
                if ch.isspace():
                    break
                if ch == "(":
                    depth += 1
                elif ch == ")":
                    if depth == 0:
                        break
                    depth -= 1
                i += 1
            dest = text[begin:i]
        title: Optional[str] = None
        m = _LINK_TITLE_RE.match(text, i)
        if m:
            raw_title = next(g for g in m.groups() if g is not None)
            title = _unescape(raw_title)
            i = m.end()
        while i < len(text) and text[i] in " \t\n":
            i += 1
        if i >= len(text) or text[i] != ")":
            return None
        return _unescape(dest), title, i + 1

    def _reference(self, label_text: str, after: int) -> Optional[Tuple[str, Optional[str], int]]:
        text = self.text
        if after < len(text) and text[after] == "[":
            close = text.find("]", after + 1)
            if close != -1:
                label = text[after + 1 : close] or label_text
                ref = self.refs.get(normalize_label(label))
                if ref is None:
                    return None
                return ref[0], ref[1], close + 1
        ref = self.refs.get(normalize_label(label_text))
        if ref is None:
            return None
        return ref[0], ref[1], after

    def _link_or_image(self, *, image: bool) -> bool:
        open_pos = self.pos + 1 if image else self.pos
        close = self._matching_bracket(open_pos)
        if close == -1:
            return False
        label_text = self.text[open_pos + 1 : close]
        after = close + 1
        target: Optional[Tuple[str, Optional[str], int]] = None
        if after < len(self.text) and self.text[after] == "(":
            target = self._inline_destination(after)
        if target is None:
            target = self._reference(label_text, after)
        if target is None:
            return False
        href, title, end = target
        children = _InlineParser(label_text, self.refs, in_link=not image).parse()
        if image:
            self._emit(Image(src=href, alt=flatten_text(children), title=title))
        else:
            self._emit(Link(href=href, children=children, title=title))
        self.pos = end
        return True


# ---------------- Emphasis resolution -----------------


def _odd_match(opener: _Delim, closer: _Delim) -> bool:
    # "Rule of 3": a delimiter that can both open and close cannot pair with one
    # whose combined length is a multiple of 3, unless both are.
    if not (opener.can_close or closer.can_open):
        return False
    total = opener.orig_count + closer.orig_count
    return total % 3 == 0 and not (opener.orig_count % 3 == 0 and closer.orig_count % 3 == 0)


def _process_emphasis(items: List[_Item]) -> None:
    i = 0
    while i < len(items):
        closer = items[i]
        if not (isinstance(closer, _Delim) and closer.can_close and closer.count > 0):
            i += 1
            continue
        j = i - 1
        opener: Optional[_Delim] = None
        while j >= 0:
            cand = items[j]
            if isinstance(cand, _Delim) and cand.char == closer.char and cand.can_open and cand.count > 0:
                if closer.char == "~":
                    if cand.count == closer.count:
                        opener = cand
                        break
                elif not _odd_match(cand, closer):
                    opener = cand
                    break
            j -= 1
        if opener is None:
            i += 1
            continue

        inner = _finalize(items[j + 1 : i])
        if closer.char == "~":
            used = closer.count
            node: Inline = Strikethrough(children=inner)
        else:
            used = 2 if opener.count >= 2 and closer.count >= 2 else 1
            node = Strong(children=inner) if used == 2 else Emphasis(children=inner)
        opener.count -= used
        closer.count -= used
        items[j + 1 : i] = [node]
        i = j + 2
        if opener.count == 0:
            del items[j]
            i -= 1
        if closer.count == 0:
            del items[i]


def _finalize(items: List[_Item]) -> Tuple[Inline, ...]:
    """Turn leftover delimiters into text and merge adjacent text nodes."""
    out: List[Inline] = []
    for item in items:
        if isinstance(item, _Delim):
            if item.count == 0:
                continue
            item = Text(item.char * item.count)
        if isinstance(item, Text) and out and isinstance(out[-1], Text):
            out[-1] = Text(out[-1].value + item.value)
        else:
            out.append(item)
    return tuple(out)


def parse_inline(text: str, refs: Optional[LinkRefs] = None) -> Tuple[Inline, ...]:
    """Parse inline markdown (code spans, emphasis, strikethrough, links, images)."""
    refs = refs if refs is not None else {}
    return _InlineParser(text.strip(), refs).parse()
