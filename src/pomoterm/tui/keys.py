"""Map key events onto timer transitions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from pomoterm.core.timer import Timer

logger = logging.getLogger(__name__)


class KeyKind(Enum):
    """How a key event was produced."""

    PRESS = "press"
    REPEAT = "repeat"
    RELEASE = "release"


@dataclass(frozen=True)
class KeyEvent:
    """A single keyboard event read from the terminal."""

    key: str
    kind: KeyKind = KeyKind.PRESS


class Command(Enum):
    """Outcome of dispatching one key event."""

    NONE = "none"
    QUIT = "quit"
    TOGGLE_PAUSE = "toggle_pause"
    RESET = "reset"


KEY_BINDINGS: dict[str, Command] = {
    "q": Command.QUIT,
    "Q": Command.QUIT,
    " ": Command.TOGGLE_PAUSE,
    "r": Command.RESET,
    "R": Command.RESET,
}


def dispatch(event: KeyEvent, timer: Timer, now: float) -> Command:
    """Apply the transition bound to *event* and return the command it meant.

    Only presses count; repeats and releases are ignored so terminals that
    report both edges of a keystroke do not toggle twice.  Quitting is left
    to the caller.
    """
    if event.kind is not KeyKind.PRESS:
        return Command.NONE
    command = KEY_BINDINGS.get(event.key, Command.NONE)
    if command is Command.TOGGLE_PAUSE:
        timer.toggle(now)
    elif command is Command.RESET:
        timer.reset(now)
    if command is not Command.NONE:
        logger.debug("Key %r -> %s", event.key, command.value)
    return command
