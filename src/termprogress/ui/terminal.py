"""
Terminal driver built on rich's Console.

Renderers never write escape sequences themselves; they go through a
``Terminal``, which knows whether stdout is an interactive terminal and turns
every cursor operation into a no-op when it is not. All physical writes happen
under ``Terminal.lock`` so a spinner tick and an explicit update cannot
interleave their output.
"""

import os
import threading
from typing import Optional

from rich.console import Console, RenderableType
from rich.control import Control, ControlType

DEFAULT_COLUMNS = 80


class Terminal:
    """Thin capability layer over a stdout console and a stderr console."""

    def __init__(self, console: Optional[Console] = None,
                 error_console: Optional[Console] = None):
        self.console = console or Console(highlight=False)
        self.error_console = error_console or Console(stderr=True, highlight=False)
        self.lock = threading.RLock()
        self._cursor_hidden = False

    @property
    def is_interactive(self) -> bool:
        return self.console.is_terminal and os.getenv("CI") != "true"

    @property
    def columns(self) -> int:
        return self.console.width or DEFAULT_COLUMNS

    @property
    def supports_color(self) -> bool:
        return self.console.color_system is not None and os.getenv("FORCE_COLOR") != "0"

    @property
    def cursor_hidden(self) -> bool:
        return self._cursor_hidden

    def clear_line(self) -> None:
        if not self.is_interactive:
            return
        with self.lock:
            self.console.control(
                Control.move_to_column(0),
                Control((ControlType.ERASE_IN_LINE, 2)),
            )

    def hide_cursor(self) -> None:
        if not self.is_interactive:
            return
        with self.lock:
            self.console.show_cursor(False)
            self._cursor_hidden = True

    def show_cursor(self) -> None:
        """Make the cursor visible again. Safe to call at any time."""
        if not self.is_interactive:
            return
        with self.lock:
            self.console.show_cursor(True)
            self._cursor_hidden = False

    def rewrite_line(self, renderable: RenderableType) -> None:
        """Replace the current line with ``renderable`` (no newline)."""
        with self.lock:
            self.clear_line()
            self.console.print(renderable, end="", soft_wrap=True)

    def write(self, renderable: RenderableType, end: str = "") -> None:
        with self.lock:
            self.console.print(renderable, end=end, soft_wrap=True)

    def write_line(self, renderable: RenderableType = "") -> None:
        self.write(renderable, end="\n")

    def write_error(self, renderable: RenderableType) -> None:
        with self.lock:
            self.error_console.print(renderable, soft_wrap=True)


_default_terminal: Optional[Terminal] = None


def get_terminal() -> Terminal:
    """Return the process-wide terminal for stdout/stderr."""
    global _default_terminal
    if _default_terminal is None:
        _default_terminal = Terminal()
    return _default_terminal
