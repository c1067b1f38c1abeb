"""Exclusive terminal ownership: cbreak input plus a full-screen rich display."""

from __future__ import annotations

import logging
import os
import select
import sys
import termios
import tty
from contextlib import contextmanager
from typing import Iterator, Optional

from rich.console import Console, RenderableType
from rich.live import Live

from pomoterm.tui.keys import KeyEvent, KeyKind

logger = logging.getLogger(__name__)


class TerminalError(Exception):
    """Raised when the terminal cannot be configured, drawn to, or read."""


class Terminal:
    """Draws renderables and polls for key presses on an acquired terminal."""

    def __init__(self, live: Live, fd: int) -> None:
        self._live = live
        self._fd = fd

    def draw(self, renderable: RenderableType) -> None:
        """Replace the screen contents with *renderable*."""
        try:
            self._live.update(renderable, refresh=True)
        except OSError as error:
            raise TerminalError(f"Drawing failed: {error}") from error

    def poll(self, timeout: float) -> Optional[KeyEvent]:
        """Wait up to *timeout* seconds for a key press.

        Reads one byte per call, so keys typed between polls are returned
        one at a time on later calls.  Escape sequences and non-ASCII input
        arrive byte by byte and never match a binding, so they are ignored.
        """
        try:
            ready, _, _ = select.select([self._fd], [], [], timeout)
            if not ready:
                return None
            data = os.read(self._fd, 1)
        except OSError as error:
            raise TerminalError(f"Reading input failed: {error}") from error
        if not data:
            return None
        return KeyEvent(data.decode("ascii", errors="replace"), KeyKind.PRESS)


@contextmanager
def open_terminal(
    console: Optional[Console] = None, fd: Optional[int] = None
) -> Iterator[Terminal]:
    """Acquire the terminal for the duration of the ``with`` block.

    Puts the input descriptor in cbreak mode and switches to the alternate
    screen; both are restored on every exit path, including exceptions.
    """
    if fd is None:
        fd = sys.stdin.fileno()
    try:
        saved = termios.tcgetattr(fd)
    except termios.error as error:
        raise TerminalError(f"Input is not a terminal: {error}") from error

    try:
        tty.setcbreak(fd)
        with Live(
            "",
            console=console,
            screen=True,
            auto_refresh=False,
            transient=True,
        ) as live:
            logger.debug("Terminal acquired (fd=%d)", fd)
            yield Terminal(live, fd)
    except termios.error as error:
        raise TerminalError(f"Terminal setup failed: {error}") from error
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        logger.debug("Terminal restored (fd=%d)", fd)
