"""Typed models used across the application."""

from .article import Article
from .catalog import ArticleCatalog

__all__ = ["Article", "ArticleCatalog"]
