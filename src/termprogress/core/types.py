"""
Value types shared by the progress tracking core.
"""

from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Any, Dict, Optional, Union


class TrackerState(str, Enum):
    """Lifecycle of a progress tracker."""
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETED = "completed"


class SessionState(str, Enum):
    """Lifecycle of a progress session.

    Adds ``STOPPED`` to the tracker states: halted externally without
    reaching completion.
    """
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETED = "completed"
    STOPPED = "stopped"


@dataclass(frozen=True)
class ProgressMetrics:
    """Derived metrics produced by a calculator for one instant."""
    current: float
    total: float
    percentage: float
    elapsed: float
    eta: float
    speed: float
    is_complete: bool
    is_indeterminate: bool


@dataclass(frozen=True)
class ProgressSnapshot:
    """Immutable record of progress at one instant."""
    current: float
    total: float
    percentage: float
    elapsed: float
    eta: float
    speed: float
    description: str
    is_complete: bool
    is_indeterminate: bool
    state: TrackerState

    def to_dict(self) -> Dict[str, Any]:
        """Flatten the snapshot, with the state as its plain string value."""
        data = asdict(self)
        data["state"] = self.state.value
        return data


@dataclass(frozen=True)
class StateChange:
    """Payload delivered to state-change observers."""
    new_state: Union[TrackerState, SessionState]
    old_state: Union[TrackerState, SessionState]
    tracker: Optional[Any] = field(default=None, compare=False, repr=False)
