"""
Coarse wall clock used for all expiry comparisons.

Times are whole seconds since the epoch. A clock never goes backwards
during its lifetime, even if the system clock is adjusted.
"""

from __future__ import annotations

import math
import time
from typing import Any, Callable


def _as_offset(offset: Any) -> float:
    """Coerce an offset to a finite float, treating anything else as 0."""
    try:
        value = float(offset)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return value if math.isfinite(value) else 0.0


class Clock:
    """Non-decreasing clock in whole seconds."""

    def __init__(self, source: Callable[[], float] = time.time) -> None:
        self._source = source
        self._last = 0

    def now(self) -> int:
        """Current time in seconds since the epoch."""
        current = math.floor(self._source())
        if current > self._last:
            self._last = current
        return self._last

    def now_plus(self, offset: Any = None) -> int:
        """Current time plus an offset in seconds.

        Args:
            offset: Seconds to add. Absent, non-numeric or non-finite
                offsets count as 0.
        """
        return math.floor(_as_offset(offset) + self.now())


class ManualClock(Clock):
    """Clock whose time only moves when told to.

    Useful for tests and for embedding the cache in simulations.
    """

    def __init__(self, start: float = 1_700_000_000) -> None:
        self._time = float(start)
        super().__init__(source=lambda: self._time)

    def set(self, seconds: float) -> None:
        self._time = float(seconds)

    def advance(self, seconds: float) -> None:
        self._time += seconds
