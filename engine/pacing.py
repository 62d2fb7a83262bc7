"""Calling speeds and CPU difficulty levels."""

from __future__ import annotations

from enum import Enum
from typing import Tuple

# Progress signal refresh period (20 Hz).
PROGRESS_TICK = 0.05


class InvalidPacing(ValueError):
    """Raised when an interval or delay range breaks the pacing invariants."""


def validate_interval(interval: float) -> float:
    if interval <= 0:
        raise InvalidPacing(f"Interval must be positive, got {interval!r}.")
    return float(interval)


def validate_delay_range(delay_range: Tuple[float, float], interval: float) -> Tuple[float, float]:
    """Ensure ``[low, high]`` lies inside ``[0, interval)``."""
    low, high = delay_range
    if low < 0 or high < low or high >= interval:
        raise InvalidPacing(f"Delay range {delay_range!r} must lie within [0, {interval}).")
    return float(low), float(high)


class Speed(str, Enum):
    """Caller-mode cadence."""

    SLOW = "slow"
    NORMAL = "normal"
    FAST = "fast"

    @property
    def interval(self) -> float:
        return _SPEED_INTERVALS[self]


_SPEED_INTERVALS: dict[Speed, float] = {
    Speed.SLOW: 8.0,
    Speed.NORMAL: 5.0,
    Speed.FAST: 3.0,
}


class Difficulty(str, Enum):
    """Versus-CPU cadence and how quickly the CPU reacts."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def interval(self) -> float:
        """Seconds between called cards."""
        return _DIFFICULTY_PACING[self][0]

    @property
    def cpu_mark_delay(self) -> Tuple[float, float]:
        """Random delay range (seconds) before the CPU marks a called card."""
        return _DIFFICULTY_PACING[self][1]


_DIFFICULTY_PACING: dict[Difficulty, Tuple[float, Tuple[float, float]]] = {
    Difficulty.EASY: (8.0, (0.8, 2.0)),
    Difficulty.MEDIUM: (5.0, (0.5, 1.5)),
    Difficulty.HARD: (3.0, (0.2, 0.8)),
}

for _difficulty, (_interval, _delay) in _DIFFICULTY_PACING.items():
    validate_delay_range(_delay, validate_interval(_interval))
