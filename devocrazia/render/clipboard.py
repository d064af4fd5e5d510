from __future__ import annotations

import asyncio
import platform
import shutil
from typing import List, Optional, Protocol, Sequence, Tuple

from ..utils.logging import get_logger

logger = get_logger("dv.render.clipboard")

# Candidate commands in preference order; the first one on PATH wins
_COMMAND_CANDIDATES: Tuple[Tuple[str, ...], ...] = (
    ("pbcopy",),
    ("wl-copy",),
    ("xclip", "-selection", "clipboard"),
    ("xsel", "--clipboard", "--input"),
    ("clip",),
)


class Clipboard(Protocol):
    async def write(self, text: str) -> bool: ...


def get_clipboard_command_plan(system: Optional[str] = None) -> List[Tuple[str, ...]]:
    """Ordered clipboard commands worth trying on this platform."""
    system = (system or platform.system()).lower()
    if system == "darwin":
        names = {"pbcopy"}
    elif system == "windows":
        names = {"clip"}
    else:
        names = {"wl-copy", "xclip", "xsel"}
    return [cmd for cmd in _COMMAND_CANDIDATES if cmd[0] in names]


class SystemClipboard:
    """Writes text through the platform's clipboard command.

    Best effort: a missing command or a failing process yields ``False``.
    """

    def __init__(self, commands: Optional[Sequence[Tuple[str, ...]]] = None, *, timeout: float = 5.0) -> None:
        self._commands = list(commands) if commands is not None else get_clipboard_command_plan()
        self._timeout = timeout

    def resolve_command(self) -> Optional[Tuple[str, ...]]:
        for cmd in self._commands:
            if shutil.which(cmd[0]):
                return cmd
        return None

    async def write(self, text: str) -> bool:
        cmd = self.resolve_command()
        if cmd is None:
            logger.debug("No clipboard command available (tried %s)", [c[0] for c in self._commands])
            return False
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
            await asyncio.wait_for(proc.communicate(text.encode("utf-8")), timeout=self._timeout)
        except (OSError, asyncio.TimeoutError) as exc:
            logger.warning("Clipboard command %s failed: %s", cmd[0], exc)
            return False
        if proc.returncode != 0:
            logger.warning("Clipboard command %s exited with %s", cmd[0], proc.returncode)
            return False
        return True


class MemoryClipboard:
    """In-process clipboard; keeps every written text."""

    def __init__(self) -> None:
        self.history: List[str] = []

    @property
    def text(self) -> Optional[str]:
        return self.history[-1] if self.history else None

    async def write(self, text: str) -> bool:
        self.history.append(text)
        return True
