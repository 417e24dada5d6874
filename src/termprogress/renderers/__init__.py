"""
Renderers turn progress snapshots into output.
"""

from .base import ProgressRenderer, SupportsRender
from .console import ConsoleProgressRenderer, format_time, format_speed, format_count
from .silent import SilentProgressRenderer, CapturedProgress
from .multi import MultiProgressRenderer, BoundRenderer

__all__ = [
    "ProgressRenderer",
    "SupportsRender",
    "ConsoleProgressRenderer",
    "SilentProgressRenderer",
    "CapturedProgress",
    "MultiProgressRenderer",
    "BoundRenderer",
    "format_time",
    "format_speed",
    "format_count",
]
