"""Article detail view: slug resolution, content fetch and document state.

Each :meth:`ArticleDetailView.show` takes a fresh request token; a fetch that
resolves after a newer request was made is discarded, so the displayed
content always belongs to the most recently requested slug.
"""

from __future__ import annotations

import asyncio
from typing import Dict, List, Literal, Optional, Protocol, Tuple

from ..models import Article, ArticleCatalog
from ..render import (
    Block,
    CodeBlockWidget,
    iter_code_blocks,
    parse_document,
    render_html,
)
from ..render.clipboard import Clipboard
from ..utils.logging import get_logger
from ..utils.site_config import DEFAULT_COPY_RESET_SECONDS

logger = get_logger("dv.views.detail")

DetailState = Literal["idle", "not_found", "loading", "ready"]

LISTING_PATH = "/articles"


class ContentSource(Protocol):
    async def fetch(self, slug: str) -> str: ...


class ArticleDetailView:
    def __init__(
        self,
        catalog: ArticleCatalog,
        fetcher: ContentSource,
        *,
        clipboard: Optional[Clipboard] = None,
        reset_delay: float = DEFAULT_COPY_RESET_SECONDS,
    ) -> None:
        self.catalog = catalog
        self.fetcher = fetcher
        self.clipboard = clipboard
        self.reset_delay = reset_delay

        self.state: DetailState = "idle"
        self.slug: Optional[str] = None
        self.article: Optional[Article] = None
        self.content: Optional[str] = None
        self.blocks: Tuple[Block, ...] = ()
        self.widgets: List[CodeBlockWidget] = []

        self._request_token = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def request_token(self) -> int:
        return self._request_token

    def _close_widgets(self) -> None:
        for widget in self.widgets:
            widget.close()
        self.widgets = []

    def _reset_document(self) -> None:
        self._close_widgets()
        self.content = None
        self.blocks = ()

    async def show(self, slug: str) -> DetailState:
        """Resolve ``slug`` and load its content. Returns the resulting state."""
        self._request_token += 1
        token = self._request_token
        self._reset_document()
        self.slug = slug
        self.article = self.catalog.find_by_slug(slug)

        if self.article is None:
            logger.info("Article not found: %s", slug)
            self.state = "not_found"
            return self.state

        self.state = "loading"
        content = await self.fetcher.fetch(slug)
        if token != self._request_token:
            logger.debug("Discarding stale content for %s (token %s, current %s)", slug, token, self._request_token)
            return self.state

        self.content = content
        self.blocks = parse_document(content)
        self.widgets = [
            CodeBlockWidget(block, clipboard=self.clipboard, reset_delay=self.reset_delay)
            for block in iter_code_blocks(self.blocks)
        ]
        self.state = "ready"
        return self.state

    def open(self, slug: str) -> asyncio.Task:
        """Schedule :meth:`show` for ``slug``, cancelling a pending one."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = asyncio.get_running_loop().create_task(self.show(slug))
        return self._task

    def close(self) -> None:
        """Leave the page: invalidate pending fetches and stop copy timers."""
        self._request_token += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self._reset_document()
        self.slug = None
        self.article = None
        self.state = "idle"

    async def copy(self, index: int) -> str:
        """Copy the ``index``-th code block of the document."""
        return await self.widgets[index].copy()

    def copy_states(self) -> Dict[int, str]:
        return {i: w.state for i, w in enumerate(self.widgets)}

    def render_html(self) -> str:
        return render_html(self.blocks, copy_states=self.copy_states())
