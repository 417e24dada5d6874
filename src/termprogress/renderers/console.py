"""
Interactive console renderer.

On a terminal the renderer redraws a single line in place: a fixed-width bar
with stats for determinate work, a spinner frame for indeterminate work. When
stdout is not interactive (pipes, CI logs) it prints one line per 10% milestone
instead of redrawing.
"""

import re
import time
from typing import Any, Callable, Optional

from rich.text import Text

from .base import ProgressRenderer
from ..config.models import ProgressConfig
from ..core.types import ProgressSnapshot
from ..ui.effects import Colors
from ..ui.spinner import Spinner
from ..ui.terminal import Terminal, get_terminal
from ..utils.logging import get_logger

# Columns reserved next to the bar for description and stats.
STATS_WIDTH = 30
MIN_BAR_LENGTH = 10

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def format_time(seconds: float) -> str:
    """Compact duration: ``42s``, ``3m 7s``, ``2h 15m``."""
    if seconds < 60:
        return f"{int(seconds + 0.5)}s"
    if seconds < 3600:
        return f"{int(seconds // 60)}m {int(seconds % 60 + 0.5)}s"
    return f"{int(seconds // 3600)}h {int((seconds % 3600) // 60)}m"


def format_speed(speed: float) -> str:
    """Throughput: milliseconds per item when slower than one item a second."""
    if speed <= 0:
        return "0/s"
    if speed < 1:
        return f"{1000 / speed:.0f}ms/item"
    if speed < 100:
        return f"{speed:.1f}/s"
    return f"{int(speed + 0.5)}/s"


def format_count(value: float) -> str:
    """Render whole numbers without a trailing ``.0``."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


class ConsoleProgressRenderer(ProgressRenderer):
    """Draws progress bars and spinners on a ``Terminal``."""

    def __init__(self, config: Optional[ProgressConfig] = None,
                 terminal: Optional[Terminal] = None,
                 clock: Callable[[], float] = time.perf_counter,
                 **overrides: Any):
        if overrides:
            base = config.model_dump() if config is not None else {}
            config = ProgressConfig(**{**base, **overrides})
        self.config = config if config is not None else ProgressConfig()
        self.terminal = terminal if terminal is not None else get_terminal()
        self.colors = Colors(self.config.use_colors and self.terminal.supports_color)
        self.spinner = Spinner.preset(self.config.spinner)
        self.bar_length = min(
            self.config.bar_length,
            max(MIN_BAR_LENGTH, self.terminal.columns - STATS_WIDTH),
        )
        self._clock = clock
        self.logger = get_logger(__name__)

        self.last_output: Optional[str] = None
        self._last_render_time: Optional[float] = None
        self._has_rendered_completion = False
        self._last_milestone = -1
        self._line_open = False

    @property
    def has_rendered_completion(self) -> bool:
        return self._has_rendered_completion

    def render(self, snapshot: ProgressSnapshot) -> None:
        with self.terminal.lock:
            if snapshot.is_complete and self._has_rendered_completion:
                return

            now = self._clock()
            if self._is_throttled(snapshot, now):
                return
            self._last_render_time = now

            if self.config.template:
                line = Text(self.render_template(snapshot))
            else:
                line = self.format_line(snapshot)
            self.last_output = line.plain

            if self.terminal.is_interactive:
                self._write_interactive(line, snapshot)
            else:
                self._write_milestone(line, snapshot)

            if snapshot.is_complete:
                self._has_rendered_completion = True

    def _is_throttled(self, snapshot: ProgressSnapshot, now: float) -> bool:
        throttle = self.config.update_throttle
        if throttle <= 0 or snapshot.is_complete or self._last_render_time is None:
            return False
        return (now - self._last_render_time) * 1000 < throttle

    def _write_interactive(self, line: Text, snapshot: ProgressSnapshot) -> None:
        self.terminal.rewrite_line(line)
        self._line_open = True

        if snapshot.is_complete:
            self.terminal.write_line(self.colors.success(" ✓ Complete!"))
            self._line_open = False

    def _write_milestone(self, line: Text, snapshot: ProgressSnapshot) -> None:
        if snapshot.is_indeterminate:
            milestone = 0
        else:
            milestone = int(snapshot.percentage // 10)

        if snapshot.is_complete or milestone > self._last_milestone:
            self._last_milestone = milestone
            self.terminal.write_line(line)

    def format_line(self, snapshot: ProgressSnapshot) -> Text:
        """Build the styled status line for a snapshot."""
        if snapshot.is_indeterminate:
            if snapshot.is_complete:
                return Text(f"{snapshot.description}:")
            return Text.assemble(
                f"{snapshot.description}: ",
                self.colors.info(self.spinner.next()),
                " Working...",
            )

        filled_length = int(snapshot.percentage / 100 * self.bar_length)
        empty_length = self.bar_length - filled_length
        filled_style = "green" if snapshot.is_complete else "cyan"

        line = Text.assemble(
            f"{snapshot.description}: [",
            self.colors.colorize(self.config.filled_char * filled_length, filled_style),
            self.colors.dim(self.config.empty_char * empty_length),
            "]",
        )

        if self.config.show_percentage:
            line.append(" ")
            line.append_text(self.colors.bright(f"{snapshot.percentage:.{self.config.precision}f}%"))

        line.append(f" ({format_count(snapshot.current)}/{format_count(snapshot.total)})")

        if self.config.show_speed and snapshot.speed > 0:
            line.append(" ")
            line.append_text(self.colors.dim(format_speed(snapshot.speed)))

        if self.config.show_eta and snapshot.eta > 0:
            line.append(" ETA: ")
            line.append_text(self.colors.dim(format_time(snapshot.eta)))

        return line

    def render_template(self, snapshot: ProgressSnapshot) -> str:
        """Substitute ``{field}`` placeholders; unknown names are left as-is."""
        values = snapshot.to_dict()

        def substitute(match: "re.Match[str]") -> str:
            key = match.group(1)
            if key not in values:
                return match.group(0)
            return self._format_field(key, values[key])

        return _PLACEHOLDER.sub(substitute, self.config.template)

    def _format_field(self, key: str, value: Any) -> str:
        if key == "percentage":
            return f"{value:.{self.config.precision}f}"
        if key in ("current", "total"):
            return format_count(value)
        if key in ("elapsed", "eta"):
            return format_time(value)
        if key == "speed":
            return f"{value:.1f}"
        return str(value)

    def cleanup(self) -> None:
        with self.terminal.lock:
            if self._line_open and self.terminal.is_interactive:
                self.terminal.write_line()
            self._line_open = False
            self.terminal.show_cursor()

    def reset(self) -> None:
        with self.terminal.lock:
            self._has_rendered_completion = False
            self._last_render_time = None
            self._last_milestone = -1
            self.last_output = None
            self.spinner.reset()
