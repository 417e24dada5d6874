"""
Fan-out renderer: routes snapshots to per-session child renderers.
"""

import threading
from typing import Dict, Hashable, Iterable, Optional

from .base import ProgressRenderer
from ..core.types import ProgressSnapshot
from ..utils.error_handling import safe_call
from ..utils.logging import get_logger


class MultiProgressRenderer(ProgressRenderer):
    """Holds one child renderer per session id.

    ``render(snapshot, progress_id)`` reaches only the matching child;
    ``cleanup()`` and ``reset()`` are broadcast. Dispatch is serialized so two
    sessions never write at the same time.
    """

    def __init__(self):
        self._renderers: Dict[Hashable, ProgressRenderer] = {}
        self._lock = threading.RLock()
        self.logger = get_logger(__name__)

    def add_progress(self, progress_id: Hashable, renderer: ProgressRenderer) -> None:
        with self._lock:
            self._renderers[progress_id] = renderer

    def remove_progress(self, progress_id: Hashable) -> bool:
        with self._lock:
            return self._renderers.pop(progress_id, None) is not None

    def get(self, progress_id: Hashable) -> Optional[ProgressRenderer]:
        return self._renderers.get(progress_id)

    @property
    def line_count(self) -> int:
        return len(self._renderers)

    def ids(self) -> Iterable[Hashable]:
        return list(self._renderers)

    def render(self, snapshot: ProgressSnapshot, progress_id: Hashable = None) -> None:
        with self._lock:
            renderer = self._renderers.get(progress_id)
            if renderer is None:
                return
            renderer.render(snapshot)

    def cleanup(self) -> None:
        with self._lock:
            for progress_id in list(self._renderers):
                self.cleanup_one(progress_id)

    def reset(self) -> None:
        with self._lock:
            for progress_id in list(self._renderers):
                self.reset_one(progress_id)

    def cleanup_one(self, progress_id: Hashable) -> None:
        renderer = self._renderers.get(progress_id)
        if renderer is not None:
            safe_call(renderer.cleanup, logger=self.logger, context="Renderer cleanup")

    def reset_one(self, progress_id: Hashable) -> None:
        reset = getattr(self._renderers.get(progress_id), "reset", None)
        if reset is not None:
            safe_call(reset, logger=self.logger, context="Renderer reset")

    def bind(self, progress_id: Hashable) -> "BoundRenderer":
        """A renderer view that a single session can own."""
        return BoundRenderer(self, progress_id)


class BoundRenderer(ProgressRenderer):
    """Routes one session's calls to its slot in a ``MultiProgressRenderer``."""

    def __init__(self, parent: MultiProgressRenderer, progress_id: Hashable):
        self.parent = parent
        self.progress_id = progress_id

    def render(self, snapshot: ProgressSnapshot) -> None:
        self.parent.render(snapshot, self.progress_id)

    def cleanup(self) -> None:
        self.parent.cleanup_one(self.progress_id)

    def reset(self) -> None:
        self.parent.reset_one(self.progress_id)
