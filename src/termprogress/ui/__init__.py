"""
Terminal UI layer for termprogress.

This module wraps the rich console as the terminal driver and provides the
spinner frame sequences and the colored one-line notices used around
progress output.
"""

from .terminal import Terminal, get_terminal, DEFAULT_COLUMNS
from .spinner import Spinner, PRESETS, frames_for
from .effects import Colors, ProgressEffects

__all__ = [
    # Terminal driver
    "Terminal",
    "get_terminal",
    "DEFAULT_COLUMNS",

    # Spinners
    "Spinner",
    "PRESETS",
    "frames_for",

    # Effects
    "Colors",
    "ProgressEffects",
]
