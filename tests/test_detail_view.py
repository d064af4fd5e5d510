import asyncio

from devocrazia.fetchers import FALLBACK_CONTENT, ContentFetcher
from devocrazia.render import MemoryClipboard
from devocrazia.views import ArticleDetailView


class GatedFetcher:
    """Fetcher whose responses resolve only when the test releases them."""

    def __init__(self):
        self.calls = []
        self.gates = {}

    async def fetch(self, slug):
        self.calls.append(slug)
        gate = self.gates.setdefault(slug, asyncio.Event())
        await gate.wait()
        return f"# {slug}\n\n```python\nprint('{slug}')\n```\n"

    def release(self, slug):
        self.gates.setdefault(slug, asyncio.Event()).set()


def test_unknown_slug_is_not_found_without_fetch(catalog):
    fetcher = GatedFetcher()
    view = ArticleDetailView(catalog, fetcher)
    state = asyncio.run(view.show("no-such-article"))
    assert state == "not_found"
    assert view.article is None
    assert fetcher.calls == []


def test_show_renders_blocks_and_widgets(catalog):
    async def run():
        fetcher = GatedFetcher()
        fetcher.release("article-1")
        view = ArticleDetailView(catalog, fetcher, clipboard=MemoryClipboard())
        state = await view.show("article-1")
        return view, state

    view, state = asyncio.run(run())
    assert state == "ready"
    assert view.article.id == 1
    assert view.blocks[0].kind == "heading"
    assert len(view.widgets) == 1
    assert 'data-code-index="0"' in view.render_html()


def test_later_slug_wins_when_earlier_fetch_resolves_last(catalog):
    async def run():
        fetcher = GatedFetcher()
        view = ArticleDetailView(catalog, fetcher)
        first = asyncio.create_task(view.show("article-1"))
        await asyncio.sleep(0)
        second = asyncio.create_task(view.show("article-2"))
        await asyncio.sleep(0)
        assert view.state == "loading"

        fetcher.release("article-2")
        await second
        fetcher.release("article-1")
        await first
        return view

    view = asyncio.run(run())
    assert view.state == "ready"
    assert view.slug == "article-2"
    assert view.content.startswith("# article-2")


def test_open_cancels_previous_request(catalog):
    async def run():
        fetcher = GatedFetcher()
        view = ArticleDetailView(catalog, fetcher)
        first = view.open("article-1")
        await asyncio.sleep(0)
        second = view.open("article-2")
        fetcher.release("article-2")
        await second
        await asyncio.sleep(0)
        return view, first

    view, first = asyncio.run(run())
    assert first.cancelled()
    assert view.article.slug == "article-2"


def test_close_stops_copy_timers(catalog):
    async def run():
        fetcher = GatedFetcher()
        fetcher.release("article-3")
        view = ArticleDetailView(catalog, fetcher, clipboard=MemoryClipboard(), reset_delay=0.05)
        await view.show("article-3")
        widget = view.widgets[0]
        await view.copy(0)
        copied_html = view.render_html()
        view.close()
        await asyncio.sleep(0.2)
        return view, widget, copied_html

    view, widget, copied_html = asyncio.run(run())
    assert ">Copied</button>" in copied_html
    assert widget.closed
    assert widget.state == "copied"
    assert view.state == "idle"
    assert view.widgets == []


def test_navigating_closes_previous_widgets(catalog):
    async def run():
        fetcher = GatedFetcher()
        fetcher.release("article-1")
        fetcher.release("article-2")
        view = ArticleDetailView(catalog, fetcher, clipboard=MemoryClipboard())
        await view.show("article-1")
        old = view.widgets[0]
        await view.show("article-2")
        return old, view

    old, view = asyncio.run(run())
    assert old.closed
    assert not view.widgets[0].closed


def test_missing_content_uses_fallback(catalog, tmp_path):
    async def run():
        async with ContentFetcher(str(tmp_path)) as fetcher:
            view = ArticleDetailView(catalog, fetcher)
            await view.show("article-4")
            return view

    view = asyncio.run(run())
    assert view.state == "ready"
    assert view.content == FALLBACK_CONTENT
    assert view.blocks[0].kind == "heading"


def test_undecodable_content_reaches_ready_with_fallback(catalog, tmp_path):
    (tmp_path / "article-4.md").write_bytes(b"\xff\xfe not utf-8")

    async def run():
        async with ContentFetcher(str(tmp_path)) as fetcher:
            view = ArticleDetailView(catalog, fetcher)
            await view.show("article-4")
            return view

    view = asyncio.run(run())
    assert view.state == "ready"
    assert view.content == FALLBACK_CONTENT
