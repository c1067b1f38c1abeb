"""Timer core — a pure state-machine countdown timer."""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
"""Source of monotonic "now" readings, in seconds."""

DEFAULT_CLOCK: Clock = time.monotonic

DEFAULT_DURATION_SECONDS = 10


class TimerState(Enum):
    """Possible states of the timer."""

    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class Timer:
    """A countdown timer whose elapsed time survives pause/resume cycles.

    The timer never reads the clock itself: every operation receives the
    current monotonic reading as *now*.  Elapsed time is always derived from
    ``start_reference`` rather than accumulated, so a slow caller cannot make
    the countdown drift.  Contains no I/O and no threads.
    """

    def __init__(self, duration_seconds: Optional[int], now: float) -> None:
        if duration_seconds is None or duration_seconds == 0:
            duration_seconds = DEFAULT_DURATION_SECONDS
        if isinstance(duration_seconds, bool) or not isinstance(duration_seconds, int):
            raise TypeError(
                f"duration_seconds must be an integer, got {type(duration_seconds).__name__}"
            )
        if duration_seconds < 0:
            raise ValueError(f"duration_seconds must not be negative, got {duration_seconds}")

        self._duration: float = float(duration_seconds)
        self._start_reference: float = now
        self._paused_at: Optional[float] = None
        self._alert_fired: bool = False

    # -- accessors -----------------------------------------------------------

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def start_reference(self) -> float:
        return self._start_reference

    @property
    def paused(self) -> bool:
        return self._paused_at is not None

    @property
    def paused_at(self) -> Optional[float]:
        return self._paused_at

    @property
    def alert_fired(self) -> bool:
        return self._alert_fired

    # -- time accounting -----------------------------------------------------

    def elapsed(self, now: float) -> float:
        """Return seconds counted so far; frozen at the pause point while paused."""
        reference = self._paused_at if self._paused_at is not None else now
        return max(reference - self._start_reference, 0.0)

    def remaining(self, now: float) -> float:
        """Return seconds left, never below zero."""
        return max(self._duration - self.elapsed(now), 0.0)

    def progress(self, now: float) -> float:
        """Return the completed fraction of the duration, in ``[0.0, 1.0]``."""
        elapsed = self.elapsed(now)
        if elapsed >= self._duration:
            return 1.0
        return elapsed / self._duration

    def state(self, now: float) -> TimerState:
        """Return the current state at *now*."""
        if self.paused:
            return TimerState.PAUSED
        if self.remaining(now) == 0.0:
            return TimerState.COMPLETED
        return TimerState.RUNNING

    # -- transitions ---------------------------------------------------------

    def pause(self, now: float) -> None:
        """Freeze the countdown.  No-op when already paused."""
        if self.paused:
            return
        self._paused_at = now
        logger.debug("Timer paused at %.1fs elapsed", self.elapsed(now))

    def resume(self, now: float) -> None:
        """Continue the countdown.  No-op when not paused.

        The start reference moves forward by the length of the pause, so the
        paused interval never counts against the duration.
        """
        if self._paused_at is None:
            return
        self._start_reference += max(now - self._paused_at, 0.0)
        self._paused_at = None
        logger.debug("Timer resumed at %.1fs elapsed", self.elapsed(now))

    def toggle(self, now: float) -> None:
        """Pause a running timer, or resume a paused one."""
        if self.paused:
            self.resume(now)
        else:
            self.pause(now)

    def reset(self, now: float) -> None:
        """Restart the countdown from the full duration, from any state."""
        self._start_reference = now
        self._paused_at = None
        self._alert_fired = False
        logger.debug("Timer reset to %.0fs", self._duration)

    def mark_alert_fired(self) -> None:
        """Record that this run has already alerted."""
        self._alert_fired = True
