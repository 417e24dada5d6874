"""
Buffering renderer for headless runs and tests.
"""

import threading
import time
from dataclasses import dataclass
from typing import List, Optional

from .base import ProgressRenderer
from ..core.types import ProgressSnapshot


@dataclass(frozen=True)
class CapturedProgress:
    """A rendered snapshot and the wall-clock time it was captured."""
    snapshot: ProgressSnapshot
    timestamp: float


class SilentProgressRenderer(ProgressRenderer):
    """Records every snapshot instead of drawing it."""

    def __init__(self):
        self._history: List[CapturedProgress] = []
        self._last_progress: Optional[ProgressSnapshot] = None
        self._lock = threading.Lock()

    def render(self, snapshot: ProgressSnapshot) -> None:
        with self._lock:
            self._last_progress = snapshot
            self._history.append(CapturedProgress(snapshot, time.time()))

    def get_last_progress(self) -> Optional[ProgressSnapshot]:
        return self._last_progress

    def get_history(self) -> List[CapturedProgress]:
        """A copy of the capture history; mutating it does not affect the renderer."""
        with self._lock:
            return list(self._history)

    def get_snapshots(self) -> List[ProgressSnapshot]:
        with self._lock:
            return [captured.snapshot for captured in self._history]

    def clear(self) -> None:
        with self._lock:
            self._history = []
            self._last_progress = None

    def reset(self) -> None:
        self.clear()
