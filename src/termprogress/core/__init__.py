"""
Progress tracking core: snapshots, calculators, trackers and process hooks.

Sessions and the multi-session manager live in ``termprogress.core.session``
and ``termprogress.core.manager`` and are re-exported from the top-level
package.
"""

from .types import (
    ProgressMetrics,
    ProgressSnapshot,
    SessionState,
    StateChange,
    TrackerState,
)
from .calculator import (
    ProgressCalculator,
    StandardProgressCalculator,
    compute_percentage,
)
from .tracker import ProgressTracker
from .shutdown import ShutdownRegistry, get_shutdown_registry
from .ticker import PeriodicTicker

__all__ = [
    "ProgressMetrics",
    "ProgressSnapshot",
    "SessionState",
    "StateChange",
    "TrackerState",
    "ProgressCalculator",
    "StandardProgressCalculator",
    "compute_percentage",
    "ProgressTracker",
    "ShutdownRegistry",
    "get_shutdown_registry",
    "PeriodicTicker",
]
