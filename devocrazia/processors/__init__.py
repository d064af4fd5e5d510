"""Text processing helpers shared by the renderers."""

from .normalize import clean_html_to_text

__all__ = ["clean_html_to_text"]
