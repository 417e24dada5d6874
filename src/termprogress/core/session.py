"""
Progress session: the user-facing progress bar.

A session composes one ``ProgressTracker`` and one renderer and runs the
lifecycle ``idle -> active -> completed``, with ``active -> stopped`` when the
work is halted before reaching the end. While active it keeps the terminal
cursor hidden and registers a shutdown hook so an interrupted process still
restores it. Indeterminate sessions (``total <= 0``) animate on a background
tick until stopped.

Usage:
    bar = ProgressSession(len(files), "Copying").start()
    for path in files:
        copy(path)
        bar.update()
"""

import threading
import time
from typing import Any, Callable, Optional

from .calculator import ProgressCalculator, StandardProgressCalculator
from .shutdown import ShutdownRegistry, get_shutdown_registry
from .ticker import PeriodicTicker
from .tracker import Detach, ProgressObserver, ProgressTracker, StateObserver
from .types import ProgressSnapshot, SessionState, StateChange, TrackerState
from ..config.models import ProgressConfig
from ..renderers.base import ProgressRenderer
from ..renderers.console import ConsoleProgressRenderer
from ..renderers.silent import SilentProgressRenderer
from ..ui.terminal import Terminal, get_terminal
from ..utils.error_handling import safe_call
from ..utils.logging import get_logger


class ProgressSession:
    """One progress indicator: state machine, tracker and renderer."""

    def __init__(self, total: float, description: str = "Progress",
                 renderer: Optional[ProgressRenderer] = None, *,
                 config: Optional[ProgressConfig] = None,
                 terminal: Optional[Terminal] = None,
                 shutdown_registry: Optional[ShutdownRegistry] = None,
                 calculator: Optional[ProgressCalculator] = None,
                 clock: Callable[[], float] = time.perf_counter):
        self.config = config if config is not None else ProgressConfig()
        self.terminal = terminal if terminal is not None else get_terminal()
        if calculator is None:
            calculator = StandardProgressCalculator(precision=self.config.precision)
        self.tracker = ProgressTracker(total, description, calculator=calculator, clock=clock)
        self.renderer = renderer if renderer is not None else self.create_default_renderer()
        self.shutdown_registry = (shutdown_registry if shutdown_registry is not None
                                  else get_shutdown_registry())
        self.logger = get_logger(__name__)

        self._state = SessionState.IDLE
        self._released = False
        self._ticker: Optional[PeriodicTicker] = None
        self._detach_shutdown: Optional[Callable[[], bool]] = None
        self._lock = threading.RLock()

        self.tracker.add_state_observer(self._on_tracker_state)

    def create_default_renderer(self) -> ProgressRenderer:
        """Console output on a terminal, silent capture everywhere else."""
        if not self.terminal.is_interactive:
            return SilentProgressRenderer()
        return ConsoleProgressRenderer(self.config, terminal=self.terminal)

    @property
    def description(self) -> str:
        return self.tracker.description

    @property
    def state(self) -> SessionState:
        return self._state

    def get_state(self) -> SessionState:
        return self._state

    def is_completed(self) -> bool:
        return self._state == SessionState.COMPLETED

    def get_progress(self) -> ProgressSnapshot:
        return self.tracker.get_progress()

    # ----- lifecycle -------------------------------------------------------

    def start(self) -> "ProgressSession":
        with self._lock:
            if self._state != SessionState.IDLE:
                return self

            self._state = SessionState.ACTIVE
            self._released = False
            self.tracker.set_state(TrackerState.ACTIVE)
            self.terminal.hide_cursor()
            self._detach_shutdown = self.shutdown_registry.register(self._on_shutdown)

            if self.tracker.is_indeterminate:
                self._ticker = PeriodicTicker(
                    self.config.tick_interval, self._tick,
                    name=f"progress-tick:{self.description}",
                ).start()

        self.logger.debug(f"Session started: {self.description}")
        return self

    def update(self, increment: float = 1) -> ProgressSnapshot:
        """Advance progress and render.

        An idle session is started first. A stopped session still counts and
        renders without restarting, and completes when it reaches the total.
        """
        with self._lock:
            if self._state == SessionState.COMPLETED:
                return self.tracker.get_progress()
            if self._state == SessionState.IDLE:
                self.start()

            snapshot = self.tracker.increment(increment)
            self.renderer.render(snapshot)

            if snapshot.is_complete:
                self._state = SessionState.COMPLETED

        if snapshot.is_complete:
            self.stop()
        return snapshot

    def complete(self) -> ProgressSnapshot:
        """Force completion. Renders exactly once however often it is called."""
        with self._lock:
            if self._state == SessionState.COMPLETED:
                return self.tracker.get_progress()

            self._state = SessionState.COMPLETED
            snapshot = self.tracker.complete()
            self.renderer.render(snapshot)
            self.tracker.notify_observers(snapshot)

        self.stop()
        return snapshot

    def stop(self) -> "ProgressSession":
        """Release the terminal: show cursor, end the tick, run renderer cleanup.

        Safe to call repeatedly and from a shutdown handler. A completed
        session stays completed; an active one becomes stopped.
        """
        self.terminal.show_cursor()

        with self._lock:
            if self._state in (SessionState.IDLE, SessionState.STOPPED) or self._released:
                return self

            self._released = True
            old_state = self._state
            if self._state != SessionState.COMPLETED:
                self._state = SessionState.STOPPED

            ticker, self._ticker = self._ticker, None
            detach, self._detach_shutdown = self._detach_shutdown, None

        # cancel outside the lock: the tick body takes the same lock
        if ticker is not None:
            ticker.cancel()
        if detach is not None:
            detach()

        safe_call(self.renderer.cleanup, logger=self.logger, context="Renderer cleanup")

        if self._state == SessionState.STOPPED:
            self.logger.debug(f"Session stopped before completion: {self.description}")
            self.tracker.notify_state_change(SessionState.STOPPED, old_state)
        return self

    def reset(self) -> "ProgressSession":
        """Return to idle with zero progress, ready to start again."""
        if self._state == SessionState.ACTIVE:
            self.stop()

        with self._lock:
            self.tracker.reset()
            reset = getattr(self.renderer, "reset", None)
            if reset is not None:
                reset()
            self._state = SessionState.IDLE
            self._released = False
        return self

    def set_total(self, total: float) -> "ProgressSession":
        self.tracker.set_total(total)
        return self

    # ----- observers -------------------------------------------------------

    def on_progress(self, callback: ProgressObserver) -> Detach:
        return self.tracker.add_observer(callback)

    def off_progress(self, callback: ProgressObserver) -> bool:
        return self.tracker.remove_observer(callback)

    def on_state_change(self, callback: StateObserver) -> Detach:
        return self.tracker.add_state_observer(callback)

    def off_state_change(self, callback: StateObserver) -> bool:
        return self.tracker.remove_state_observer(callback)

    # ----- internals -------------------------------------------------------

    def _on_tracker_state(self, event: StateChange) -> None:
        if event.new_state == TrackerState.COMPLETED:
            self._state = SessionState.COMPLETED

    def _tick(self) -> None:
        with self._lock:
            if self._state != SessionState.ACTIVE or self._released:
                return
            self.renderer.render(self.tracker.get_progress())

    def _on_shutdown(self) -> None:
        self.stop()
        self.renderer.cleanup()

    def __enter__(self) -> "ProgressSession":
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is None and not self.is_completed():
            self.complete()
        else:
            self.stop()

    def __repr__(self) -> str:
        return (f"ProgressSession(description={self.description!r}, "
                f"state={self._state.value}, current={self.tracker.current}, "
                f"total={self.tracker.total})")

    # ----- factories -------------------------------------------------------

    @classmethod
    def create_console(cls, total: float, description: str = "Progress",
                       config: Optional[ProgressConfig] = None, **kwargs: Any) -> "ProgressSession":
        config = config or ProgressConfig()
        renderer = ConsoleProgressRenderer(config, terminal=kwargs.get("terminal"))
        return cls(total, description, renderer, config=config, **kwargs)

    @classmethod
    def create_silent(cls, total: float, description: str = "Progress", **kwargs: Any) -> "ProgressSession":
        return cls(total, description, SilentProgressRenderer(), **kwargs)

    @classmethod
    def create_spinner(cls, description: str, config: Optional[ProgressConfig] = None,
                       **kwargs: Any) -> "ProgressSession":
        base = config.model_dump() if config is not None else {}
        config = ProgressConfig(**{**base, "show_percentage": False, "show_eta": False})
        return cls.create_console(0, description, config, **kwargs)


class ProgressSessionBuilder:
    """Fluent construction of console-rendered sessions."""

    def __init__(self, config: Optional[ProgressConfig] = None):
        self._options = config.model_dump() if config is not None else {}
        self.total: float = 100
        self.description = "Progress"
        self._session_kwargs: dict = {}

    def with_total(self, total: float) -> "ProgressSessionBuilder":
        self.total = total
        return self

    def with_description(self, description: str) -> "ProgressSessionBuilder":
        self.description = description
        return self

    def with_bar_length(self, length: int) -> "ProgressSessionBuilder":
        self._options["bar_length"] = length
        return self

    def with_chars(self, filled: str, empty: str) -> "ProgressSessionBuilder":
        self._options["filled_char"] = filled
        self._options["empty_char"] = empty
        return self

    def with_colors(self, enabled: bool = True) -> "ProgressSessionBuilder":
        self._options["use_colors"] = enabled
        return self

    def with_precision(self, precision: int) -> "ProgressSessionBuilder":
        self._options["precision"] = precision
        return self

    def show_eta(self, show: bool = True) -> "ProgressSessionBuilder":
        self._options["show_eta"] = show
        return self

    def show_speed(self, show: bool = True) -> "ProgressSessionBuilder":
        self._options["show_speed"] = show
        return self

    def show_percentage(self, show: bool = True) -> "ProgressSessionBuilder":
        self._options["show_percentage"] = show
        return self

    def with_template(self, template: str) -> "ProgressSessionBuilder":
        self._options["template"] = template
        return self

    def with_test_mode(self, enabled: bool = True) -> "ProgressSessionBuilder":
        self._options["test_mode"] = enabled
        self._options["update_throttle"] = 100 if enabled else 0
        return self

    def with_update_throttle(self, ms: float) -> "ProgressSessionBuilder":
        self._options["update_throttle"] = ms
        return self

    def with_spinner_style(self, name: str) -> "ProgressSessionBuilder":
        self._options["spinner"] = name
        return self

    def with_config(self, config: ProgressConfig) -> "ProgressSessionBuilder":
        self._options.update(config.model_dump())
        return self

    def with_session_options(self, **kwargs: Any) -> "ProgressSessionBuilder":
        """Pass-through for terminal, shutdown_registry, calculator or clock."""
        self._session_kwargs.update(kwargs)
        return self

    def for_spinner(self) -> "ProgressSessionBuilder":
        self.total = 0
        self._options["show_percentage"] = False
        self._options["show_eta"] = False
        return self

    def build_config(self) -> ProgressConfig:
        return ProgressConfig(**self._options)

    def build(self) -> ProgressSession:
        config = self.build_config()
        renderer = ConsoleProgressRenderer(config, terminal=self._session_kwargs.get("terminal"))
        return ProgressSession(self.total, self.description, renderer,
                               config=config, **self._session_kwargs)

    def build_silent(self) -> ProgressSession:
        return ProgressSession(self.total, self.description, SilentProgressRenderer(),
                               config=self.build_config(), **self._session_kwargs)
