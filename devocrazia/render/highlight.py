from __future__ import annotations

import html
from functools import lru_cache
from typing import Optional

from pygments import highlight
from pygments.formatters import HtmlFormatter, TerminalFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from ..utils.logging import get_logger

logger = get_logger("dv.render.highlight")

_HTML_FORMATTER = HtmlFormatter(nowrap=True)
_TERMINAL_FORMATTER = TerminalFormatter()


@lru_cache(maxsize=64)
def lexer_for(language: Optional[str]) -> Optional[Lexer]:
    """Resolve a fence language hint to a lexer; ``None`` when unknown."""
    if not language:
        return None
    try:
        return get_lexer_by_name(language.lower(), stripnl=False, ensurenl=False)
    except ClassNotFound:
        logger.debug("No lexer for language hint '%s'; rendering as plain text", language)
        return None


def highlight_html(code: str, language: Optional[str]) -> str:
    """Highlighted HTML spans for ``code``; escaped plain text when the hint is unknown."""
    lexer = lexer_for(language)
    if lexer is None:
        return html.escape(code)
    return highlight(code, lexer, _HTML_FORMATTER)


def highlight_terminal(code: str, language: Optional[str]) -> str:
    lexer = lexer_for(language)
    if lexer is None:
        return code
    return highlight(code, lexer, _TERMINAL_FORMATTER).rstrip("\n")


def highlight_css(selector: str = ".code-block") -> str:
    """Stylesheet for the token classes emitted by ``highlight_html``."""
    return _HTML_FORMATTER.get_style_defs(selector)
