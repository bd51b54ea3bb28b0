# backend/app/core/time_provider.py
"""
Clock sources.

Services receive a ``TimeProvider`` through their constructor so that "now"
is always explicit. Production code uses ``SystemTimeProvider``; tests and
CLI replays use ``FixedTimeProvider``.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone

from .zoned_clock import ClockInput, ZonedClock


class TimeProvider(ABC):
    @abstractmethod
    def now(self) -> ZonedClock:
        """Current instant."""

    def today(self) -> date:
        """Current local calendar date in the pickup timezone."""
        return self.now().local_date()


class SystemTimeProvider(TimeProvider):
    def now(self) -> ZonedClock:
        return ZonedClock(datetime.now(timezone.utc))


class FixedTimeProvider(TimeProvider):
    """Always returns the instant it was given until moved explicitly."""

    def __init__(self, instant: ClockInput):
        self._now = ZonedClock(instant)

    def now(self) -> ZonedClock:
        return self._now

    def set_now(self, instant: ClockInput) -> None:
        self._now = ZonedClock(instant)

    def advance(self, minutes: int) -> None:
        self._now = ZonedClock(self._now.instant + timedelta(minutes=minutes))
