"""
Progress metric calculators.

A calculator turns raw counters and timestamps into the derived figures a
renderer shows: percentage, smoothed speed and ETA. Trackers own exactly one
calculator and reset it together with their own counters.
"""

from collections import deque
from decimal import Decimal, ROUND_HALF_UP
from typing import Deque

from .types import ProgressMetrics
from ..utils.error_handling import RendererContractError

DEFAULT_PERCENT_PRECISION = 2
DEFAULT_SPEED_HISTORY = 10


def compute_percentage(current: float, total: float, precision: int = DEFAULT_PERCENT_PRECISION) -> float:
    """Percentage of ``total`` reached by ``current``, clamped to 0..100.

    Computed with decimal arithmetic and half-up rounding so that
    ``compute_percentage(total, total)`` is exactly ``100.0``.
    """
    if total <= 0:
        return 0.0

    quantum = Decimal(1).scaleb(-precision)
    ratio = Decimal(current) * 100 / Decimal(total)
    percentage = float(ratio.quantize(quantum, rounding=ROUND_HALF_UP))
    return min(100.0, max(0.0, percentage))


class ProgressCalculator:
    """Strategy interface for turning counters into metrics."""

    def calculate(self, current: float, total: float, start_time: float, now: float) -> ProgressMetrics:
        raise RendererContractError(
            f"{type(self).__name__}.calculate() must be implemented by subclass"
        )

    def reset(self) -> None:
        """Forget any history accumulated between calls."""


class StandardProgressCalculator(ProgressCalculator):
    """Calculator with a moving-average speed over the last N samples."""

    def __init__(self, precision: int = DEFAULT_PERCENT_PRECISION,
                 max_history_size: int = DEFAULT_SPEED_HISTORY):
        self.precision = precision
        self.max_history_size = max_history_size
        self.speed_history: Deque[float] = deque(maxlen=max_history_size)

    def calculate(self, current: float, total: float, start_time: float, now: float) -> ProgressMetrics:
        elapsed = max(0.0, now - start_time)
        speed = self.calculate_speed(current, elapsed)

        eta = 0.0
        if current > 0 and current < total and speed > 0:
            eta = (total - current) / speed

        return ProgressMetrics(
            current=current,
            total=total,
            percentage=compute_percentage(current, total, self.precision),
            elapsed=elapsed,
            eta=eta,
            speed=speed,
            is_complete=total > 0 and current >= total,
            is_indeterminate=total <= 0,
        )

    def calculate_speed(self, current: float, elapsed: float) -> float:
        """Record the instantaneous rate and return the mean of the history."""
        if elapsed > 0:
            self.speed_history.append(current / elapsed)

        if not self.speed_history:
            return 0.0

        return sum(self.speed_history) / len(self.speed_history)

    def reset(self) -> None:
        self.speed_history.clear()
