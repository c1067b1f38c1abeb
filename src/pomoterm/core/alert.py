"""One-shot audible alert fired when a countdown reaches zero."""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

import numpy as np

from pomoterm.core.timer import Timer

BEEP_FREQUENCY_HZ = 440.0
BEEP_SECONDS = 0.5
SAMPLE_RATE_HZ = 44100
BEEP_VOLUME = 0.3


class AudioError(Exception):
    """Raised when an audio sink cannot play or stop a sound."""


class AudioSink(Protocol):
    """Fire-and-forget playback target used by :class:`AlertTrigger`."""

    def play(self) -> None: ...

    def stop(self) -> None: ...


def sine_tone(
    frequency_hz: float = BEEP_FREQUENCY_HZ,
    seconds: float = BEEP_SECONDS,
    sample_rate_hz: int = SAMPLE_RATE_HZ,
    volume: float = BEEP_VOLUME,
) -> np.ndarray:
    """Return a mono float32 sine wave of *seconds* at *frequency_hz*."""
    if seconds <= 0:
        raise ValueError(f"seconds must be positive, got {seconds}")
    t = np.arange(int(sample_rate_hz * seconds)) / sample_rate_hz
    return (volume * np.sin(2 * np.pi * frequency_hz * t)).astype(np.float32)


def _load_sounddevice() -> Any:
    # sounddevice loads PortAudio at import time and raises OSError when the
    # library is absent, so the import is deferred to the first alert.
    try:
        import sounddevice
    except (ImportError, OSError) as error:
        raise AudioError(f"Audio backend unavailable: {error}") from error
    return sounddevice


class SoundDeviceBeeper:
    """Plays a short sine tone through the default sounddevice output.

    ``play`` returns as soon as the tone is queued; sounddevice plays it on
    its own callback thread and nothing waits for it to finish.
    """

    def __init__(
        self,
        frequency_hz: float = BEEP_FREQUENCY_HZ,
        seconds: float = BEEP_SECONDS,
        sample_rate_hz: int = SAMPLE_RATE_HZ,
    ) -> None:
        self._tone = sine_tone(frequency_hz, seconds, sample_rate_hz)
        self._sample_rate_hz = sample_rate_hz

    def play(self) -> None:
        sd = _load_sounddevice()
        try:
            sd.play(self._tone, self._sample_rate_hz, blocking=False)
        except Exception as error:
            raise AudioError(f"Audio playback failed: {error}") from error

    def stop(self) -> None:
        sd = _load_sounddevice()
        try:
            sd.stop()
        except Exception as error:
            raise AudioError(f"Audio stop failed: {error}") from error


class AlertTrigger:
    """Fires the audio sink exactly once per timer run.

    Checked once per loop tick.  The alert only fires while the timer is
    running, so a run that expires while paused alerts on the first tick
    after it is resumed.
    """

    def __init__(self, sink: AudioSink, logger: Optional[logging.Logger] = None) -> None:
        self._sink = sink
        self._logger = logger or logging.getLogger(__name__)

    def check(self, timer: Timer, now: float) -> bool:
        """Fire the alert if *timer* just completed.  Return True when it fired."""
        if timer.paused or timer.alert_fired or timer.remaining(now) > 0.0:
            return False
        timer.mark_alert_fired()
        self._logger.info("Countdown of %.0fs complete", timer.duration)
        try:
            self._sink.play()
        except AudioError as error:
            self._logger.warning("Alert playback failed: %s", error)
        return True

    def release(self) -> None:
        """Stop any tone still playing, ahead of a new run."""
        try:
            self._sink.stop()
        except AudioError as error:
            self._logger.debug("Alert release failed: %s", error)
