"""
Clock -- the ledger's only source of "now".

Activity records are stamped with ``now()`` and the 24-hour activity summary
measures back from it; report metadata carries it as ``generated_at``.
Services take a Clock in their constructor and fall back to SystemClock.

Every value a Clock hands out is a timezone-aware UTC datetime, which is
also how the activity log stores its timestamps.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone

DEFAULT_START = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        raise ValueError("Clock times must be timezone-aware")
    return value.astimezone(timezone.utc)


class Clock(ABC):

    @abstractmethod
    def now(self) -> datetime:
        """Current time, timezone-aware, in UTC."""


class SystemClock(Clock):

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    A clock that stands still until a test moves it.

    ``advance`` takes a timedelta (or a number of seconds) so tests can step
    across the activity summary's 24-hour window directly.
    """

    def __init__(self, start: datetime = DEFAULT_START):
        self._current = _utc(start)

    def now(self) -> datetime:
        return self._current

    def set_time(self, when: datetime) -> None:
        self._current = _utc(when)

    def advance(self, step: timedelta | int | float = 1) -> datetime:
        """Move forward by ``step`` and return the new time."""
        if not isinstance(step, timedelta):
            step = timedelta(seconds=step)
        if step < timedelta(0):
            raise ValueError("A clock cannot run backwards")
        self._current += step
        return self._current
