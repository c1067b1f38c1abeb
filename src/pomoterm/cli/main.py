"""CLI entry point for pomoterm.

Uses Click to expose the ``pomoterm`` command, which hands the requested
duration to the session loop.
"""

from __future__ import annotations

import sys
from typing import Callable, TypeVar

import click

from pomoterm.core.session import run_countdown
from pomoterm.tui.terminal import TerminalError

T = TypeVar("T")


def _run(action: Callable[[], T]) -> T:
    """Execute *action*, converting ``TerminalError`` to a CLI error.

    The terminal has already been restored by the time the error reaches
    this point.  The message is printed to stderr and the process exits
    with code 1.
    """
    try:
        return action()
    except TerminalError as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)


@click.command()
@click.argument("seconds", type=click.IntRange(min=0))
def cli(seconds: int) -> None:
    """Count down SECONDS seconds in the terminal (0 means 10).

    Space pauses and resumes, R restarts the countdown, Q quits.
    """
    _run(lambda: run_countdown(seconds))
