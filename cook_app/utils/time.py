"""
Session clock abstraction and time helpers.

The state machine, finalizer and runtime obtain "now" exclusively through a
SessionClock so that pause accounting and timed stage completion can be
replayed deterministically with FakeClock in tests.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional


class SessionClock(ABC):
    """Source of the current instant for a cook session."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current timezone-aware UTC instant."""
        pass


class SystemClock(SessionClock):
    """Wall-clock implementation returning the current UTC time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FakeClock(SessionClock):
    """
    Deterministic clock that advances only when told to.

    Args:
        start: Initial instant, defaults to 2024-01-01T00:00:00Z
    """

    def __init__(self, start: Optional[datetime] = None):
        if start is None:
            start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self._now = ensure_utc(start)

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float = 0, minutes: float = 0, hours: float = 0) -> datetime:
        """Move the clock forward and return the new instant."""
        delta = timedelta(seconds=seconds, minutes=minutes, hours=hours)
        if delta < timedelta(0):
            raise ValueError("FakeClock cannot move backwards")
        self._now = self._now + delta
        return self._now

    def set(self, instant: datetime) -> datetime:
        """Jump to an absolute instant, which must not be in the past."""
        instant = ensure_utc(instant)
        if instant < self._now:
            raise ValueError("FakeClock cannot move backwards")
        self._now = instant
        return self._now


def ensure_utc(ts: datetime) -> datetime:
    """
    Normalize a datetime to UTC.

    Naive datetimes are assumed to already be UTC.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def elapsed_seconds(start_time: datetime, end_time: datetime) -> float:
    """
    Calculate elapsed time in seconds between two instants.

    Args:
        start_time: Start timestamp
        end_time: End timestamp

    Returns:
        Elapsed time in seconds (negative if end precedes start)
    """
    return (end_time - start_time).total_seconds()


def format_timestamp(ts: Optional[datetime]) -> Optional[str]:
    """Format an instant as ISO8601 for logging and persistence."""
    if ts is None:
        return None
    return ts.isoformat()


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO8601 string written by format_timestamp."""
    if value is None:
        return None
    return ensure_utc(datetime.fromisoformat(value.replace('Z', '+00:00')))
