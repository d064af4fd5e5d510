"""Markdown document rendering: parse to blocks, render to HTML or text."""

from .blocks import Block, CodeBlock, flatten_text, iter_code_blocks
from .clipboard import MemoryClipboard, SystemClipboard
from .code_block import CodeBlockWidget
from .highlight import highlight_css
from .html import render_html
from .markdown import parse_document
from .text import render_text

__all__ = [
    "Block",
    "CodeBlock",
    "flatten_text",
    "iter_code_blocks",
    "MemoryClipboard",
    "SystemClipboard",
    "CodeBlockWidget",
    "highlight_css",
    "render_html",
    "parse_document",
    "render_text",
]
