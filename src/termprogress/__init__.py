"""
Terminal progress reporting for long-running operations.

This package tracks the progress of a unit of work, derives percentage,
speed and ETA from it, and renders it as an in-place terminal bar, an
indeterminate spinner, periodic milestone lines or silently captured
snapshots.

Key Components:
- ProgressSession: Lifecycle, tracker and renderer for one progress indicator
- ProgressTracker: Counters, timing and observers
- Renderers: Console, silent and fan-out output
- MultiProgressManager: Independent sessions addressed by id
- Async helpers: with_progress, with_spinner, with_progress_and_state

Usage:
    from termprogress import ProgressSession

    with ProgressSession.create_console(len(items), "Processing") as bar:
        for item in items:
            handle(item)
            bar.update()
"""

from .core import (
    ProgressMetrics,
    ProgressSnapshot,
    SessionState,
    StateChange,
    TrackerState,
    ProgressCalculator,
    StandardProgressCalculator,
    compute_percentage,
    ProgressTracker,
    ShutdownRegistry,
    get_shutdown_registry,
    PeriodicTicker,
)
from .core.session import ProgressSession, ProgressSessionBuilder
from .core.manager import MultiProgressManager
from .renderers import (
    ProgressRenderer,
    SupportsRender,
    ConsoleProgressRenderer,
    SilentProgressRenderer,
    CapturedProgress,
    MultiProgressRenderer,
    BoundRenderer,
    format_time,
    format_speed,
)
from .config import ProgressConfig, TermProgressConfig, load_config
from .integration import (
    with_progress,
    with_spinner,
    with_progress_and_state,
    progress_session,
)
from .utils.error_handling import (
    TermProgressError,
    RendererContractError,
    ConfigurationError,
    ObserverError,
)

__all__ = [
    # Values and states
    "ProgressMetrics",
    "ProgressSnapshot",
    "SessionState",
    "StateChange",
    "TrackerState",

    # Tracking
    "ProgressCalculator",
    "StandardProgressCalculator",
    "compute_percentage",
    "ProgressTracker",
    "ShutdownRegistry",
    "get_shutdown_registry",
    "PeriodicTicker",

    # Sessions
    "ProgressSession",
    "ProgressSessionBuilder",
    "MultiProgressManager",

    # Renderers
    "ProgressRenderer",
    "SupportsRender",
    "ConsoleProgressRenderer",
    "SilentProgressRenderer",
    "CapturedProgress",
    "MultiProgressRenderer",
    "BoundRenderer",
    "format_time",
    "format_speed",

    # Configuration
    "ProgressConfig",
    "TermProgressConfig",
    "load_config",

    # Async helpers
    "with_progress",
    "with_spinner",
    "with_progress_and_state",
    "progress_session",

    # Errors
    "TermProgressError",
    "RendererContractError",
    "ConfigurationError",
    "ObserverError",
]

__version__ = "0.1.0"

PROGRESS_SYSTEM_INFO = {
    "version": __version__,
    "renderers": ["console", "silent", "multi"],
    "spinner_presets": ["dots", "line", "arrow", "bounce", "clock"],
    "features": [
        "determinate_bars",
        "indeterminate_spinners",
        "milestone_output",
        "template_output",
        "async_helpers",
        "shutdown_cursor_restore",
    ],
}


def get_progress_system_info() -> dict:
    """Get information about the progress display system.

    Returns:
        Dictionary with progress system information
    """
    return PROGRESS_SYSTEM_INFO.copy()
