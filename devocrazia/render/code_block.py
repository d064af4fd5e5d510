"""Copy affordance for a rendered code block.

A widget moves ``idle -> copied`` on :meth:`CodeBlockWidget.copy` and back to
``idle`` once the reset delay elapses. The reset is a ``loop.call_later``
handle owned by the widget, so a repeated copy re-arms it and
:meth:`CodeBlockWidget.close` cancels it.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Literal, Optional

from ..utils.logging import get_logger
from ..utils.site_config import DEFAULT_COPY_RESET_SECONDS
from .blocks import CodeBlock, flatten_text
from .clipboard import Clipboard, SystemClipboard

logger = get_logger("dv.render.code_block")

CopyState = Literal["idle", "copied"]


class CodeBlockWidget:
    def __init__(
        self,
        block: CodeBlock,
        *,
        clipboard: Optional[Clipboard] = None,
        reset_delay: float = DEFAULT_COPY_RESET_SECONDS,
        on_change: Optional[Callable[["CodeBlockWidget"], None]] = None,
    ) -> None:
        self.block = block
        self.clipboard = clipboard if clipboard is not None else SystemClipboard()
        self.reset_delay = reset_delay
        self.on_change = on_change
        self._state: CopyState = "idle"
        self._reset_handle: Optional[asyncio.TimerHandle] = None
        self._closed = False

    @property
    def state(self) -> CopyState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def reset_pending(self) -> bool:
        return self._reset_handle is not None

    def _set_state(self, state: CopyState) -> None:
        if state == self._state:
            return
        self._state = state
        if self.on_change is not None:
            self.on_change(self)

    async def copy(self) -> CopyState:
        """Place the block's text on the clipboard and show the copied state."""
        if self._closed:
            return self._state
        try:
            ok = await self.clipboard.write(flatten_text(self.block))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Clipboard write raised: %s", exc)
            ok = False
        if not ok:
            logger.debug("Copy of %s-line code block did not reach the clipboard", self.block.text.count("\n") + 1)
        if self._closed:
            return self._state
        self._set_state("copied")
        self._cancel_reset()
        loop = asyncio.get_running_loop()
        self._reset_handle = loop.call_later(self.reset_delay, self._reset)
        return self._state

    def _reset(self) -> None:
        self._reset_handle = None
        if not self._closed:
            self._set_state("idle")

    def _cancel_reset(self) -> None:
        if self._reset_handle is not None:
            self._reset_handle.cancel()
            self._reset_handle = None

    def close(self) -> None:
        """Cancel any pending reset; the widget stops changing state."""
        self._cancel_reset()
        self._closed = True
