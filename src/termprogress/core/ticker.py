"""
Cancellable periodic callback used to animate indeterminate progress.
"""

import threading
from typing import Callable, Optional

from ..utils.error_handling import safe_call
from ..utils.logging import get_logger


class PeriodicTicker:
    """Runs ``callback`` every ``interval`` seconds on a daemon thread.

    After ``cancel()`` returns the callback is not invoked again, unless
    ``cancel()`` was called from the callback itself, in which case the
    current invocation finishes and no further one starts.
    """

    def __init__(self, interval: float, callback: Callable[[], None], name: str = "progress-tick"):
        self.interval = interval
        self.callback = callback
        self.name = name
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.logger = get_logger(__name__)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stopped.is_set()

    def start(self) -> "PeriodicTicker":
        if self._thread is not None:
            return self

        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        return self

    def cancel(self) -> None:
        self._stopped.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=max(1.0, self.interval * 2))

    def _run(self) -> None:
        while not self._stopped.wait(self.interval):
            safe_call(self.callback, logger=self.logger, context="Tick callback")
