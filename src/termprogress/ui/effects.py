"""
Text styling and status notices for progress output.

This module provides the small set of decorations the renderers and the
async helpers use: colored fragments for bars and stats, and one-line
success/failure notices printed when a wrapped task finishes.
"""

from typing import Optional

from rich.text import Text

from .terminal import Terminal, get_terminal


class Colors:
    """Applies named styles to text fragments when colors are enabled."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def colorize(self, text: str, style: str) -> Text:
        if not self.enabled:
            return Text(text)
        return Text(text, style=style)

    def success(self, text: str) -> Text:
        return self.colorize(text, "green")

    def error(self, text: str) -> Text:
        return self.colorize(text, "red")

    def warning(self, text: str) -> Text:
        return self.colorize(text, "yellow")

    def info(self, text: str) -> Text:
        return self.colorize(text, "cyan")

    def dim(self, text: str) -> Text:
        return self.colorize(text, "dim")

    def bright(self, text: str) -> Text:
        return self.colorize(text, "bold")


class ProgressEffects:
    """Status notices for completed or failed operations."""

    def __init__(self, terminal: Optional[Terminal] = None, use_colors: bool = True):
        self.terminal = terminal if terminal is not None else get_terminal()
        self.colors = Colors(use_colors and self.terminal.supports_color)

    def show_success_effect(self, description: str) -> None:
        """Show a success line on stdout."""
        self.terminal.write_line(self.colors.success(f"✓ {description} completed"))

    def show_failure_effect(self, description: str, error: BaseException) -> None:
        """Show a failure line naming the task and the error on stderr."""
        message = str(error) or type(error).__name__
        self.terminal.write_error(self.colors.error(f"\n✗ {description} failed: {message}"))

    def show_info_effect(self, message: str) -> None:
        self.terminal.write_line(self.colors.info(message))
