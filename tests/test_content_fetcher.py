import asyncio
import logging

import httpx

from devocrazia.fetchers import FALLBACK_CONTENT, ContentFetcher


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_fetch_returns_body_unmodified():
    seen = []

    def handler(request):
        seen.append(str(request.url))
        return httpx.Response(200, text="# Title\n\nBody  \n")

    async def run():
        async with _client(handler) as client:
            fetcher = ContentFetcher("https://example.com/content/articles/", client=client)
            return await fetcher.fetch("my-post")

    assert asyncio.run(run()) == "# Title\n\nBody  \n"
    assert seen == ["https://example.com/content/articles/my-post.md"]


def test_non_success_status_falls_back(caplog):
    def handler(request):
        return httpx.Response(404, text="not here")

    async def run():
        async with _client(handler) as client:
            return await ContentFetcher("https://example.com/c", client=client).fetch("gone")

    with caplog.at_level(logging.WARNING, logger="dv.fetchers.content"):
        assert asyncio.run(run()) == FALLBACK_CONTENT
    assert any("404" in r.getMessage() for r in caplog.records)


def test_transport_error_falls_back():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    async def run():
        async with _client(handler) as client:
            return await ContentFetcher("https://example.com/c", client=client).fetch("x")

    assert asyncio.run(run()) == FALLBACK_CONTENT


def test_fetch_from_local_directory(tmp_path):
    (tmp_path / "hello.md").write_text("Hello *world*", encoding="utf-8")
    fetcher = ContentFetcher(str(tmp_path))
    assert not fetcher.remote
    assert asyncio.run(fetcher.fetch("hello")) == "Hello *world*"
    assert asyncio.run(fetcher.fetch("missing")) == FALLBACK_CONTENT


def test_undecodable_local_file_falls_back(tmp_path, caplog):
    (tmp_path / "bad.md").write_bytes(b"# Title\n\n\xff\xfe broken")
    fetcher = ContentFetcher(str(tmp_path))
    with caplog.at_level(logging.WARNING, logger="dv.fetchers.content"):
        assert asyncio.run(fetcher.fetch("bad")) == FALLBACK_CONTENT
    assert any("bad.md" in r.getMessage() for r in caplog.records)


def test_injected_client_is_not_closed():
    def handler(request):
        return httpx.Response(200, text="ok")

    async def run():
        client = _client(handler)
        fetcher = ContentFetcher("https://example.com/c", client=client)
        await fetcher.aclose()
        closed = client.is_closed
        await client.aclose()
        return closed

    assert asyncio.run(run()) is False


def test_fallback_document_shape():
    assert FALLBACK_CONTENT.startswith("# Content not available\n\n")
