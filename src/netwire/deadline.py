"""Millisecond deadline budgets shared by every blocking operation."""

from __future__ import annotations

import math
import time
from typing import Callable, Optional


def poll_timeout(timeout_ms: float) -> int:
    """
    Convert a millisecond budget into a poll() timeout.

    Inputs:
      - timeout_ms: Remaining budget in milliseconds (negative clamps to 0).
    Outputs:
      - int: Whole milliseconds, rounded up so a sub-millisecond remainder
        still waits instead of spinning.
    """
    if timeout_ms <= 0:
        return 0
    return int(math.ceil(timeout_ms))


def select_timeout(timeout_ms: float) -> float:
    """
    Convert a millisecond budget into a select() timeout.

    Inputs:
      - timeout_ms: Remaining budget in milliseconds (negative clamps to 0).
    Outputs:
      - float: Seconds.
    """
    if timeout_ms <= 0:
        return 0.0
    return timeout_ms / 1000.0


class Deadline:
    """
    A budget of milliseconds measured from the moment of construction.

    Inputs:
      - timeout_ms: Total budget; 0 or negative means "no deadline" (block).
      - clock: Monotonic clock returning seconds (injectable for tests).
    Outputs:
      - Deadline whose remaining_ms() shrinks with elapsed wall-clock time.

    Example:
      >>> d = Deadline(1000)
      >>> 0 <= d.remaining_ms() <= 1000
      True
    """

    __slots__ = ("_timeout_ms", "_clock", "_start")

    def __init__(
        self, timeout_ms: float, clock: Optional[Callable[[], float]] = None
    ) -> None:
        self._timeout_ms = timeout_ms
        self._clock = clock or time.monotonic
        self._start = self._clock()

    @property
    def timeout_ms(self) -> float:
        return self._timeout_ms

    @property
    def blocking(self) -> bool:
        """True when no budget applies and callers should block indefinitely."""
        return self._timeout_ms <= 0

    def elapsed_ms(self) -> float:
        return (self._clock() - self._start) * 1000.0

    def remaining_ms(self) -> float:
        """Remaining budget, never negative. Meaningless for blocking deadlines."""
        if self.blocking:
            return 0.0
        return max(0.0, self._timeout_ms - self.elapsed_ms())

    def expired(self) -> bool:
        return not self.blocking and self.remaining_ms() <= 0

    def __repr__(self) -> str:
        if self.blocking:
            return "Deadline(blocking)"
        return f"Deadline(remaining_ms={self.remaining_ms():.1f})"
