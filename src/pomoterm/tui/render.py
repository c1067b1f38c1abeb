"""Turn timer readings into the rich layout drawn each tick."""

from __future__ import annotations

from dataclasses import dataclass

from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.text import Text

from pomoterm.core.timer import Timer

TITLE = " Pomodoro Timer "

KEY_HINTS: tuple[tuple[str, str], ...] = (
    ("Quit", "<Q>"),
    ("Pause", "<Space>"),
    ("Reset", "<R>"),
)


@dataclass(frozen=True)
class DisplaySnapshot:
    """Everything the screen shows for one tick."""

    remaining_text: str
    progress: float
    paused: bool
    title: str = TITLE
    hints: tuple[tuple[str, str], ...] = KEY_HINTS


def format_remaining(seconds: float) -> str:
    """Format *seconds* as ``MM:SS``, dropping any fractional second."""
    total = max(int(seconds), 0)
    return f"{total // 60:02d}:{total % 60:02d}"


def snapshot(remaining: float, progress: float, paused: bool) -> DisplaySnapshot:
    """Build a snapshot from raw readings, clamping *progress* to ``[0.0, 1.0]``."""
    return DisplaySnapshot(
        remaining_text=format_remaining(remaining),
        progress=min(max(progress, 0.0), 1.0),
        paused=paused,
    )


def snapshot_of(timer: Timer, now: float) -> DisplaySnapshot:
    """Read *timer* at *now* into a snapshot."""
    return snapshot(timer.remaining(now), timer.progress(now), timer.paused)


def _hint_line(hints: tuple[tuple[str, str], ...]) -> Text:
    line = Text()
    for index, (label, key) in enumerate(hints):
        if index:
            line.append("  ")
        line.append(f"{label} ")
        line.append(key, style="red")
    return line


def build_layout(snap: DisplaySnapshot) -> RenderableType:
    """Build the bordered screen layout for *snap*.

    The result is a plain rich renderable with no side effects; drawing it
    is up to the caller.
    """
    time_title = "Time (paused)" if snap.paused else "Time"
    time_style = "dim" if snap.paused else "bold"
    time_panel = Panel(
        Text(snap.remaining_text, style=time_style),
        title=time_title,
        title_align="left",
        box=box.SIMPLE,
    )
    gauge = Panel(
        ProgressBar(total=1.0, completed=snap.progress, complete_style="green", finished_style="green"),
        title="Progress",
        title_align="left",
        subtitle=_hint_line(snap.hints),
        subtitle_align="left",
    )
    return Panel(
        Group(time_panel, gauge),
        title=snap.title,
        box=box.ROUNDED,
        padding=(1, 2),
    )
