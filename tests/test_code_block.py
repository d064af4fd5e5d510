import asyncio

import pytest

from devocrazia.render import CodeBlock, CodeBlockWidget, MemoryClipboard
from devocrazia.render.clipboard import SystemClipboard, get_clipboard_command_plan

DELAY = 0.2


class FailingClipboard:
    async def write(self, text):
        raise RuntimeError("no clipboard")


def _widget(**kwargs):
    kwargs.setdefault("clipboard", MemoryClipboard())
    kwargs.setdefault("reset_delay", DELAY)
    return CodeBlockWidget(CodeBlock(text="docker ps\ndocker logs", language="bash"), **kwargs)


def test_copy_then_reset_after_delay():
    async def run():
        widget = _widget()
        assert widget.state == "idle"
        await widget.copy()
        copied = widget.state
        await asyncio.sleep(DELAY * 4)
        return widget, copied

    widget, copied = asyncio.run(run())
    assert copied == "copied"
    assert widget.state == "idle"
    assert widget.clipboard.text == "docker ps\ndocker logs"


def test_close_before_delay_prevents_late_reset():
    async def run():
        widget = _widget()
        await widget.copy()
        widget.close()
        await asyncio.sleep(DELAY * 4)
        return widget

    widget = asyncio.run(run())
    assert widget.closed
    assert not widget.reset_pending
    assert widget.state == "copied"


def test_repeated_copy_rearms_single_reset():
    async def run():
        changes = []
        widget = _widget(on_change=lambda w: changes.append(w.state))
        await widget.copy()
        await asyncio.sleep(DELAY / 2)
        await widget.copy()
        await asyncio.sleep(DELAY * 0.75)
        still_copied = widget.state
        await asyncio.sleep(DELAY * 2)
        return widget, still_copied, changes

    widget, still_copied, changes = asyncio.run(run())
    assert still_copied == "copied"
    assert widget.state == "idle"
    assert changes == ["copied", "idle"]


def test_clipboard_failure_still_shows_copied():
    async def run():
        widget = _widget(clipboard=FailingClipboard())
        state = await widget.copy()
        widget.close()
        return state

    assert asyncio.run(run()) == "copied"


def test_closed_widget_ignores_copy():
    async def run():
        widget = _widget()
        widget.close()
        return await widget.copy(), widget

    state, widget = asyncio.run(run())
    assert state == "idle"
    assert widget.clipboard.history == []


def test_system_clipboard_without_commands_returns_false():
    clipboard = SystemClipboard(commands=[("definitely-not-a-clipboard-tool",)])
    assert clipboard.resolve_command() is None
    assert asyncio.run(clipboard.write("x")) is False


@pytest.mark.parametrize(
    "system,first",
    [("Darwin", "pbcopy"), ("Windows", "clip"), ("Linux", "wl-copy")],
)
def test_command_plan_per_platform(system, first):
    plan = get_clipboard_command_plan(system)
    assert plan[0][0] == first
