"""pomoterm: a full-screen Pomodoro countdown timer for the terminal."""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
