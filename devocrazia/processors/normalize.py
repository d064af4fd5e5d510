from __future__ import annotations

import html
import re

from bs4 import BeautifulSoup

_whitespace_re = re.compile(r"\s+")


def clean_html_to_text(raw_html: str | None) -> str:
    """Reduce an HTML fragment to normalized plain text.

    - Strip tags (script and style bodies are dropped entirely)
    - Unescape HTML entities
    - Collapse whitespace
    """
    if not raw_html:
        return ""

    soup = BeautifulSoup(raw_html, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    text = soup.get_text(" ")
    text = html.unescape(text)
    text = _whitespace_re.sub(" ", text)
    return text.strip()
