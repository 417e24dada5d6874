"""
Process shutdown registry.

Sessions hide the terminal cursor while they run; if the process is
interrupted the cursor must come back. A ``ShutdownRegistry`` collects cleanup
tasks and runs each at most once when the process exits or receives
SIGINT/SIGTERM.

Sessions take the registry as a constructor argument; ``get_shutdown_registry``
returns the process default for callers that do not inject their own.
"""

import atexit
import signal
import sys
import threading
from typing import Callable, Dict, Optional

from ..utils.error_handling import safe_call
from ..utils.logging import get_logger

CleanupTask = Callable[[], None]


class ShutdownRegistry:
    """Collection of cleanup tasks run once per shutdown event."""

    def __init__(self):
        self._tasks: Dict[int, CleanupTask] = {}
        self._next_id = 0
        self._lock = threading.Lock()
        self._installed = False
        self.logger = get_logger(__name__)

    def __len__(self) -> int:
        return len(self._tasks)

    def register(self, task: CleanupTask) -> Callable[[], bool]:
        """Add a cleanup task; returns a function that removes it again."""
        with self._lock:
            task_id = self._next_id
            self._next_id += 1
            self._tasks[task_id] = task

        def detach() -> bool:
            with self._lock:
                return self._tasks.pop(task_id, None) is not None

        return detach

    def run_all(self) -> int:
        """Run and drop every registered task. Returns the number run.

        Tasks are removed before running so a task that re-enters the
        registry (a session detaching its own hook from ``stop()``) is safe,
        and a second shutdown event does not repeat them.
        """
        with self._lock:
            tasks = list(self._tasks.values())
            self._tasks.clear()

        for task in tasks:
            safe_call(task, logger=self.logger, context="Cleanup task")

        if tasks:
            self.logger.debug(f"Ran {len(tasks)} cleanup task(s)")
        return len(tasks)

    def install(self) -> "ShutdownRegistry":
        """Hook ``run_all`` to interpreter exit and to SIGINT/SIGTERM.

        Safe to call repeatedly. Signal handlers can only be installed from
        the main thread; elsewhere only the exit hook is registered.
        """
        if self._installed:
            return self

        atexit.register(self.run_all)

        if threading.current_thread() is threading.main_thread():
            for signum in (signal.SIGINT, signal.SIGTERM):
                signal.signal(signum, self._handle_signal)

        self._installed = True
        return self

    @property
    def installed(self) -> bool:
        return self._installed

    def _handle_signal(self, signum, frame) -> None:
        self.logger.debug(f"Received signal {signum}; running cleanup")
        self.run_all()
        sys.exit(128 + signum)


_default_registry: Optional[ShutdownRegistry] = None


def get_shutdown_registry() -> ShutdownRegistry:
    """Return the process-wide registry, installing its hooks on first use."""
    global _default_registry
    if _default_registry is None:
        _default_registry = ShutdownRegistry().install()
    return _default_registry
