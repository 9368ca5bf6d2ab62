"""
Call deadline and cancellation for enhancement runs.

A Deadline is created per enhancement call and checked before every
network request. Expiry or cancellation raises DeadlineExceeded, which
only the orchestrator catches.
"""

import time
from typing import Optional


class DeadlineExceeded(Exception):
    """Raised when an enhancement call runs out of time or is cancelled."""
    pass


class Deadline:
    """Wall-clock budget that can also be cancelled explicitly."""

    def __init__(self, seconds: Optional[float] = None, clock=time.monotonic):
        self._clock = clock
        self._expires_at = None if seconds is None else clock() + seconds
        self._cancelled = False

    @classmethod
    def unbounded(cls) -> "Deadline":
        return cls(None)

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def remaining(self) -> Optional[float]:
        """Seconds left, or None for an unbounded deadline."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        if self._cancelled:
            return True
        remaining = self.remaining()
        return remaining is not None and remaining <= 0.0

    def check(self, stage: str = "") -> None:
        """Raise DeadlineExceeded if the call should stop now."""
        if self._cancelled:
            raise DeadlineExceeded(f"Enhancement cancelled before {stage or 'next stage'}")
        if self.expired:
            raise DeadlineExceeded(f"Enhancement deadline exceeded before {stage or 'next stage'}")
