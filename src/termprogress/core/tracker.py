"""
Progress tracker: owns the counters of one unit of work.

The tracker is the single writer of ``current``/``total`` and of its own
lifecycle state. Every mutation goes through its methods, which recompute a
``ProgressSnapshot`` through the configured calculator and publish it to the
registered observers.

Observer registration has set semantics: an observer that is already
registered (the same object, or an equal bound method of the same object) is
not added a second time. Delivery follows registration order.
"""

import inspect
import threading
import time
from dataclasses import replace
from typing import Any, Callable, List, Optional, Union

from .calculator import ProgressCalculator, StandardProgressCalculator
from .types import ProgressSnapshot, SessionState, StateChange, TrackerState
from ..utils.error_handling import safe_call
from ..utils.logging import get_logger

ProgressObserver = Union[Callable[[ProgressSnapshot], Any], Any]
StateObserver = Union[Callable[[StateChange], Any], Any]
Detach = Callable[[], bool]


def _same_observer(a: Any, b: Any) -> bool:
    if a is b:
        return True
    # bound methods are recreated on each attribute access
    if type(a) is type(b) and (inspect.ismethod(a) or inspect.isbuiltin(a)):
        return a.__self__ is b.__self__ and a.__name__ == b.__name__
    return False


def _add_unique(observers: list, observer: Any) -> None:
    if not any(_same_observer(existing, observer) for existing in observers):
        observers.append(observer)


def _remove_same(observers: list, observer: Any) -> bool:
    for index, existing in enumerate(observers):
        if _same_observer(existing, observer):
            del observers[index]
            return True
    return False


class ProgressTracker:
    """Tracks completion state, timing and observers for one task."""

    def __init__(self, total: float, description: str = "Progress",
                 calculator: Optional[ProgressCalculator] = None,
                 clock: Callable[[], float] = time.perf_counter):
        self._total = total
        self._current = 0
        self._description = description
        self._clock = clock
        self._start_time = clock()
        self._last_update_time = self._start_time
        self.calculator = calculator if calculator is not None else StandardProgressCalculator()
        self._state = TrackerState.IDLE
        self._final_snapshot: Optional[ProgressSnapshot] = None

        # ordered, deduplicated with _same_observer; observers need not be hashable
        self._observers: List[ProgressObserver] = []
        self._state_observers: List[StateObserver] = []

        self._lock = threading.RLock()
        self.logger = get_logger(__name__)

    @property
    def current(self) -> float:
        return self._current

    @property
    def total(self) -> float:
        return self._total

    @property
    def description(self) -> str:
        return self._description

    @property
    def start_time(self) -> float:
        return self._start_time

    @property
    def last_update_time(self) -> float:
        return self._last_update_time

    @property
    def is_indeterminate(self) -> bool:
        return self._total <= 0

    # ----- observers -------------------------------------------------------

    def add_observer(self, observer: ProgressObserver) -> Detach:
        """Register a progress observer; returns a function that detaches it."""
        with self._lock:
            _add_unique(self._observers, observer)
        return lambda: self.remove_observer(observer)

    def remove_observer(self, observer: ProgressObserver) -> bool:
        with self._lock:
            return _remove_same(self._observers, observer)

    def add_state_observer(self, observer: StateObserver) -> Detach:
        """Register a state-change observer; returns a function that detaches it."""
        with self._lock:
            _add_unique(self._state_observers, observer)
        return lambda: self.remove_state_observer(observer)

    def remove_state_observer(self, observer: StateObserver) -> bool:
        with self._lock:
            return _remove_same(self._state_observers, observer)

    def notify_observers(self, snapshot: ProgressSnapshot) -> None:
        """Deliver a snapshot to every progress observer, containing failures."""
        for observer in list(self._observers):
            callback = observer if callable(observer) else getattr(observer, "on_progress", None)
            if callback is None:
                continue
            safe_call(callback, snapshot, logger=self.logger, context="Progress observer")

    def notify_state_change(self, new_state: Union[TrackerState, SessionState],
                            old_state: Union[TrackerState, SessionState]) -> None:
        event = StateChange(new_state=new_state, old_state=old_state, tracker=self)
        for observer in list(self._state_observers):
            callback = observer if callable(observer) else getattr(observer, "on_state_change", None)
            if callback is None:
                continue
            safe_call(callback, event, logger=self.logger, context="State observer")

    # ----- state -----------------------------------------------------------

    def set_state(self, new_state: TrackerState) -> None:
        with self._lock:
            old_state = self._state
            if old_state == new_state:
                return
            self._state = new_state

        self.logger.debug(f"{self._description}: {old_state.value} -> {new_state.value}")
        self.notify_state_change(new_state, old_state)

    def get_state(self) -> TrackerState:
        return self._state

    def is_completed(self) -> bool:
        return self._state == TrackerState.COMPLETED

    # ----- mutation --------------------------------------------------------

    def increment(self, amount: float = 1) -> ProgressSnapshot:
        """Advance by ``amount`` units, clamped to ``total`` for determinate work.

        A no-op returning the final snapshot once the tracker has completed.
        Negative amounts never move progress backwards.
        """
        with self._lock:
            if self._state == TrackerState.COMPLETED:
                return self._final_snapshot

            advanced = self._current + max(amount, 0)
            if self._total > 0:
                advanced = min(self._total, advanced)
            self._current = advanced
            self._last_update_time = self._clock()

            snapshot = self._build_snapshot()
            if snapshot.is_complete:
                snapshot = self._freeze(snapshot)

        if snapshot.is_complete:
            self.set_state(TrackerState.COMPLETED)

        self.notify_observers(snapshot)
        return snapshot

    def complete(self) -> ProgressSnapshot:
        """Force completion. Idempotent: a second call returns the same snapshot.

        Observers are not notified here; the owning session renders and
        notifies.
        """
        with self._lock:
            if self._state == TrackerState.COMPLETED:
                return self._final_snapshot

            if self._total > 0:
                self._current = self._total
            self._last_update_time = self._clock()
            snapshot = self._freeze(self._build_snapshot())

        self.set_state(TrackerState.COMPLETED)
        return snapshot

    def reset(self) -> None:
        """Return to zero progress with fresh timestamps and speed history."""
        with self._lock:
            self._current = 0
            self._start_time = self._clock()
            self._last_update_time = self._start_time
            self._final_snapshot = None
            self.calculator.reset()

        self.set_state(TrackerState.IDLE)

    def set_total(self, total: float) -> "ProgressTracker":
        """Change the target without touching progress made so far."""
        with self._lock:
            self._total = total
        return self

    # ----- snapshots -------------------------------------------------------

    def get_progress(self) -> ProgressSnapshot:
        """Current snapshot; frozen once the tracker has completed."""
        with self._lock:
            if self._state == TrackerState.COMPLETED and self._final_snapshot is not None:
                return self._final_snapshot
            return self._build_snapshot()

    def _build_snapshot(self) -> ProgressSnapshot:
        metrics = self.calculator.calculate(
            self._current, self._total, self._start_time, self._clock()
        )
        return ProgressSnapshot(
            current=metrics.current,
            total=metrics.total,
            percentage=metrics.percentage,
            elapsed=metrics.elapsed,
            eta=metrics.eta,
            speed=metrics.speed,
            description=self._description,
            is_complete=metrics.is_complete,
            is_indeterminate=metrics.is_indeterminate,
            state=self._state,
        )

    def _freeze(self, snapshot: ProgressSnapshot) -> ProgressSnapshot:
        """Pin the completion snapshot so later reads are identical."""
        if self._final_snapshot is None:
            self._final_snapshot = replace(
                snapshot, eta=0.0, is_complete=True, state=TrackerState.COMPLETED
            )
        return self._final_snapshot
