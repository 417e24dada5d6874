"""
Spinner frame sequences for indeterminate progress.
"""

from typing import Dict, List, Optional, Sequence

from rich.spinner import Spinner as RichSpinner

PRESETS: Dict[str, List[str]] = {
    "dots": ["⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"],
    "line": ["-", "\\", "|", "/"],
    "arrow": ["←", "↖", "↑", "↗", "→", "↘", "↓", "↙"],
    "bounce": ["⠁", "⠂", "⠄", "⠂"],
    "clock": ["🕐", "🕑", "🕒", "🕓", "🕔", "🕕", "🕖", "🕗", "🕘", "🕙", "🕚", "🕛"],
}


def frames_for(name: str) -> List[str]:
    """Frames for a preset name, falling back to rich's spinner catalogue.

    Raises:
        KeyError: If neither termprogress nor rich knows the name
    """
    if name in PRESETS:
        return list(PRESETS[name])
    return list(RichSpinner(name).frames)


class Spinner:
    """Cycles through a sequence of animation frames."""

    def __init__(self, frames: Optional[Sequence[str]] = None):
        self.frames = list(frames) if frames else list(PRESETS["dots"])
        self.current = 0

    @classmethod
    def preset(cls, name: str) -> "Spinner":
        return cls(frames_for(name))

    def next(self) -> str:
        frame = self.frames[self.current]
        self.current = (self.current + 1) % len(self.frames)
        return frame

    def reset(self) -> None:
        self.current = 0
