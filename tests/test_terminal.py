"""Tests for terminal acquisition and key polling, run against a pseudo-terminal."""

from __future__ import annotations

import io
import os
import termios
from typing import Iterator
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from pomoterm.core.timer import Timer
from pomoterm.tui.keys import Command, KeyEvent, KeyKind, dispatch
from pomoterm.tui.terminal import Terminal, TerminalError, open_terminal


@pytest.fixture()
def pty_pair() -> Iterator[tuple[int, int]]:
    """Yield ``(master_fd, slave_fd)`` of a fresh pseudo-terminal."""
    master, slave = os.openpty()
    try:
        yield master, slave
    finally:
        os.close(master)
        os.close(slave)


@pytest.fixture()
def console() -> Console:
    return Console(file=io.StringIO(), width=60)


# ---------------------------------------------------------------------------
# Terminal.poll()
# ---------------------------------------------------------------------------


class TestTerminalPoll:
    """poll() returns a press event or None after the timeout."""

    def test_poll_times_out_without_input(self, pty_pair: tuple[int, int]) -> None:
        _, slave = pty_pair
        assert Terminal(MagicMock(), slave).poll(0.01) is None

    def test_poll_reads_key_press(self, pty_pair: tuple[int, int]) -> None:
        master, slave = pty_pair
        # The pty is still canonical here, so the line needs a newline to flush.
        os.write(master, b"q\n")
        terminal = Terminal(MagicMock(), slave)
        assert terminal.poll(1.0) == KeyEvent("q", KeyKind.PRESS)
        assert terminal.poll(1.0) == KeyEvent("\n", KeyKind.PRESS)

    def test_non_ascii_byte_matches_no_binding(self, pty_pair: tuple[int, int]) -> None:
        master, slave = pty_pair
        os.write(master, "é\n".encode())
        terminal = Terminal(MagicMock(), slave)
        timer = Timer(10, 0.0)
        commands = [dispatch(terminal.poll(1.0), timer, 1.0) for _ in range(3)]
        assert commands == [Command.NONE, Command.NONE, Command.NONE]

    def test_poll_closed_descriptor_raises(self, pty_pair: tuple[int, int]) -> None:
        _, slave = pty_pair
        spare = os.dup(slave)
        os.close(spare)
        with pytest.raises(TerminalError):
            Terminal(MagicMock(), spare).poll(0.01)


# ---------------------------------------------------------------------------
# Terminal.draw()
# ---------------------------------------------------------------------------


class TestTerminalDraw:
    """draw() pushes the renderable to the live display."""

    def test_draw_updates_live(self) -> None:
        live = MagicMock()
        Terminal(live, 0).draw("hello")
        live.update.assert_called_once_with("hello", refresh=True)

    def test_draw_os_error_raises_terminal_error(self) -> None:
        live = MagicMock()
        live.update.side_effect = OSError("broken pipe")
        with pytest.raises(TerminalError):
            Terminal(live, 0).draw("hello")


# ---------------------------------------------------------------------------
# open_terminal()
# ---------------------------------------------------------------------------


class TestOpenTerminal:
    """open_terminal() puts the tty in cbreak mode and always restores it."""

    def test_cbreak_inside_and_restored_after(
        self, pty_pair: tuple[int, int], console: Console
    ) -> None:
        _, slave = pty_pair
        before = termios.tcgetattr(slave)
        with open_terminal(console=console, fd=slave) as terminal:
            inside = termios.tcgetattr(slave)
            assert not inside[3] & termios.ICANON
            assert isinstance(terminal, Terminal)
        assert termios.tcgetattr(slave) == before

    def test_restored_when_body_raises(self, pty_pair: tuple[int, int], console: Console) -> None:
        _, slave = pty_pair
        before = termios.tcgetattr(slave)
        with pytest.raises(RuntimeError):
            with open_terminal(console=console, fd=slave):
                raise RuntimeError("boom")
        assert termios.tcgetattr(slave) == before

    def test_poll_in_cbreak_mode_reads_single_key(
        self, pty_pair: tuple[int, int], console: Console
    ) -> None:
        master, slave = pty_pair
        with open_terminal(console=console, fd=slave) as terminal:
            os.write(master, b" ")
            assert terminal.poll(1.0) == KeyEvent(" ", KeyKind.PRESS)

    def test_buffered_keys_are_dispatched_one_per_poll(
        self, pty_pair: tuple[int, int], console: Console
    ) -> None:
        master, slave = pty_pair
        timer = Timer(10, 0.0)
        with open_terminal(console=console, fd=slave) as terminal:
            os.write(master, b" q")
            first = terminal.poll(1.0)
            second = terminal.poll(1.0)
        assert first == KeyEvent(" ", KeyKind.PRESS)
        assert second == KeyEvent("q", KeyKind.PRESS)
        assert dispatch(first, timer, 2.0) is Command.TOGGLE_PAUSE
        assert dispatch(second, timer, 2.5) is Command.QUIT
        assert timer.paused is True

    def test_escape_sequence_matches_no_binding(
        self, pty_pair: tuple[int, int], console: Console
    ) -> None:
        master, slave = pty_pair
        timer = Timer(10, 0.0)
        with open_terminal(console=console, fd=slave) as terminal:
            os.write(master, b"\x1b[A")
            events = [terminal.poll(1.0) for _ in range(3)]
        assert [event.key for event in events] == ["\x1b", "[", "A"]
        assert all(dispatch(event, timer, 1.0) is Command.NONE for event in events)

    def test_non_tty_raises_terminal_error(self, tmp_path) -> None:
        path = tmp_path / "not-a-tty"
        path.write_text("")
        with open(path) as handle:
            with pytest.raises(TerminalError):
                with open_terminal(fd=handle.fileno()):
                    pass
