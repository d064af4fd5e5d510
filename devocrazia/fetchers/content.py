from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional
from urllib.parse import quote, urlparse

import httpx

from ..utils.logging import get_logger

logger = get_logger("dv.fetchers.content")

FALLBACK_CONTENT = "# Content not available\n\nSorry, we couldn't load the article content."

CONTENT_EXTENSION = ".md"

_DEFAULT_HEADERS = {
    "User-Agent": "devocrazia/1.0 (+content-fetcher)",
    "Accept": "text/markdown, text/plain;q=0.9, */*;q=0.1",
}


def _is_remote(base: str) -> bool:
    parsed = urlparse(base)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class ContentFetcher:
    """Retrieve raw markdown bodies by slug from a URL or a local directory.

    ``content_base`` is either an ``http(s)`` URL (bodies live at
    ``{content_base}/{slug}.md``) or a directory holding ``{slug}.md`` files.
    Any failure yields ``FALLBACK_CONTENT``; callers always get text back.
    """

    def __init__(
        self,
        content_base: str,
        *,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.content_base = content_base.rstrip("/")
        self.timeout = timeout
        self.remote = _is_remote(self.content_base)
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "ContentFetcher":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def location_for(self, slug: str) -> str:
        if self.remote:
            return f"{self.content_base}/{quote(slug)}{CONTENT_EXTENSION}"
        return str(Path(self.content_base) / f"{slug}{CONTENT_EXTENSION}")

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(headers=_DEFAULT_HEADERS, follow_redirects=True)
        return self._client

    async def fetch(self, slug: str) -> str:
        location = self.location_for(slug)
        if not self.remote:
            return await asyncio.to_thread(self._read_local, location)

        logger.debug("Fetching content from %s", location)
        try:
            response = await self._get_client().get(location, timeout=self.timeout)
        except (httpx.HTTPError, OSError):
            logger.warning("Failed to fetch content for %s", slug, exc_info=True)
            return FALLBACK_CONTENT

        if not response.is_success:
            logger.warning("Content fetch returned %d for %s", response.status_code, slug)
            return FALLBACK_CONTENT
        return response.text

    def _read_local(self, location: str) -> str:
        path = Path(location)
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed to read content file %s: %s", path, exc)
            return FALLBACK_CONTENT

    async def aclose(self) -> None:
        client = self._client
        if client is not None and self._owns_client:
            self._client = None
            await client.aclose()
