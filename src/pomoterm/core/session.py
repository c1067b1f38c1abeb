"""Session loop — drives one countdown on the terminal until the user quits."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from rich.console import RenderableType

from pomoterm.core.alert import AlertTrigger, SoundDeviceBeeper
from pomoterm.core.timer import DEFAULT_CLOCK, Clock, Timer
from pomoterm.tui.keys import Command, KeyEvent, dispatch
from pomoterm.tui.render import build_layout, snapshot_of
from pomoterm.tui.terminal import open_terminal

logger = logging.getLogger(__name__)

TICK_SECONDS = 0.1


class Screen(Protocol):
    """Display and input surface the loop runs against."""

    def draw(self, renderable: RenderableType) -> None: ...

    def poll(self, timeout: float) -> Optional[KeyEvent]: ...


class Session:
    """Single-threaded loop tying a timer to a screen and an alert.

    Each tick redraws the whole layout, checks the alert, then waits for
    input.  The input wait doubles as the tick delay.  All timing comes from
    fresh clock readings, so slow draws never skew the countdown.
    """

    def __init__(
        self,
        timer: Timer,
        screen: Screen,
        alert: AlertTrigger,
        clock: Clock = DEFAULT_CLOCK,
        tick_seconds: float = TICK_SECONDS,
    ) -> None:
        self._timer = timer
        self._screen = screen
        self._alert = alert
        self._clock = clock
        self._tick_seconds = tick_seconds

    @property
    def timer(self) -> Timer:
        return self._timer

    def tick(self) -> bool:
        """Run one loop iteration.  Return False once the user has quit."""
        now = self._clock()
        self._screen.draw(build_layout(snapshot_of(self._timer, now)))
        self._alert.check(self._timer, now)

        event = self._screen.poll(self._tick_seconds)
        if event is None:
            return True

        command = dispatch(event, self._timer, self._clock())
        if command is Command.RESET:
            self._alert.release()
        return command is not Command.QUIT

    def run(self) -> None:
        """Tick until quit."""
        logger.info("Countdown of %.0fs started", self._timer.duration)
        while self.tick():
            pass
        logger.info("Countdown session ended")


def run_countdown(duration_seconds: Optional[int], clock: Clock = DEFAULT_CLOCK) -> None:
    """Run an interactive countdown of *duration_seconds* on the controlling terminal.

    Ctrl-C ends the session the same way the quit key does.
    """
    with open_terminal() as terminal:
        timer = Timer(duration_seconds, clock())
        session = Session(timer, terminal, AlertTrigger(SoundDeviceBeeper()), clock=clock)
        try:
            session.run()
        except KeyboardInterrupt:
            logger.info("Countdown interrupted")
