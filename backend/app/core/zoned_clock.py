# backend/app/core/zoned_clock.py
"""
Instants viewed through the pickup timezone.

A ``ZonedClock`` wraps a single UTC instant. Every calendar question asked
of it (which day, which weekday, when does that day start) is answered in
the configured pickup timezone, with DST offsets resolved for the local
instant in question rather than for "now".
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Union

import pytz

from .config import settings
from .enums import Weekday

PICKUP_TZ = pytz.timezone(settings.pickup_timezone)

END_OF_DAY_TIME = time(23, 59, 59, 999000)

ClockInput = Union["ZonedClock", datetime, str]


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are read as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_instant(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Raises:
        ValueError: If the string is not a valid ISO-8601 timestamp
    """
    raw = value.strip()
    if raw[-1:] in ("Z", "z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO-8601 timestamp: {value!r}") from exc
    return ensure_utc(parsed)


def parse_time_of_day(value: str) -> time:
    """
    Parse "HH:mm" (or "HH:mm:ss") into a ``time``.

    Raises:
        ValueError: If the string is not a valid time of day
    """
    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(part.isdigit() for part in parts):
        raise ValueError(f"Invalid time of day: {value!r}")
    try:
        return time(*(int(part) for part in parts))
    except ValueError as exc:
        raise ValueError(f"Invalid time of day: {value!r}") from exc


def time_to_minutes(value: Union[str, time]) -> int:
    """Minutes since local midnight for "HH:mm" / "HH:mm:ss" or a ``time``."""
    parsed = parse_time_of_day(value) if isinstance(value, str) else value
    return parsed.hour * 60 + parsed.minute


def minutes_to_time_string(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_time(value: Union[str, time, None]) -> str | None:
    """Normalize a stored time of day to "HH:mm"."""
    if value is None:
        return None
    if isinstance(value, str):
        value = parse_time_of_day(value)
    return value.strftime("%H:%M")


def _localize_strict(naive: datetime) -> datetime:
    try:
        return PICKUP_TZ.localize(naive, is_dst=None)
    except pytz.exceptions.AmbiguousTimeError:
        # Fall-back hour: take the first occurrence.
        return PICKUP_TZ.localize(naive, is_dst=True)
    except pytz.exceptions.NonExistentTimeError as exc:
        raise ValueError(
            f"{naive.isoformat()} does not exist in {settings.pickup_timezone} (DST gap)"
        ) from exc


def _localize_lenient(naive: datetime) -> datetime:
    try:
        return _localize_strict(naive)
    except ValueError:
        # Wall clock skipped by spring-forward; land on the first instant after the gap.
        return PICKUP_TZ.normalize(PICKUP_TZ.localize(naive, is_dst=False))


def _as_utc(value: ClockInput) -> datetime:
    if isinstance(value, ZonedClock):
        return value.instant
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str):
        return parse_instant(value)
    raise TypeError(f"Cannot interpret {type(value).__name__} as an instant")


class ZonedClock:
    """An immutable UTC instant with calendar operations in the pickup timezone."""

    __slots__ = ("_utc",)

    def __init__(self, value: ClockInput):
        if isinstance(value, date) and not isinstance(value, datetime):
            raise TypeError("Use ZonedClock.from_local() for calendar dates")
        self._utc = _as_utc(value)

    @classmethod
    def from_local(cls, local_date: date, local_time: Union[str, time] = time.min) -> ZonedClock:
        """
        Build from a local calendar date and wall-clock time.

        Ambiguous fall-back times resolve to the first occurrence; times in the
        spring-forward gap raise ValueError.
        """
        if isinstance(local_time, str):
            local_time = parse_time_of_day(local_time)
        return cls(_localize_strict(datetime.combine(local_date, local_time)))

    @classmethod
    def for_day(cls, local_date: date) -> ZonedClock:
        """Start of the given local calendar day."""
        return cls(_localize_lenient(datetime.combine(local_date, time.min)))

    @property
    def instant(self) -> datetime:
        """The wrapped instant as an aware UTC datetime."""
        return self._utc

    def to_local(self) -> datetime:
        return self._utc.astimezone(PICKUP_TZ)

    @property
    def year(self) -> int:
        return self.to_local().year

    @property
    def month(self) -> int:
        return self.to_local().month

    @property
    def day(self) -> int:
        return self.to_local().day

    @property
    def hour(self) -> int:
        return self.to_local().hour

    @property
    def minute(self) -> int:
        return self.to_local().minute

    def local_date(self) -> date:
        return self.to_local().date()

    def weekday(self) -> Weekday:
        return Weekday.from_index(self.to_local().weekday())

    def weekday_name(self) -> str:
        return self.weekday().value

    def iso_week(self) -> int:
        return self.to_local().isocalendar()[1]

    def start_of_day(self) -> ZonedClock:
        return ZonedClock(_localize_lenient(datetime.combine(self.local_date(), time.min)))

    def end_of_day(self) -> ZonedClock:
        return ZonedClock(_localize_lenient(datetime.combine(self.local_date(), END_OF_DAY_TIME)))

    def start_of_week(self) -> ZonedClock:
        local_date = self.local_date()
        return ZonedClock.for_day(local_date - timedelta(days=local_date.weekday()))

    def end_of_week(self) -> ZonedClock:
        local_date = self.local_date()
        sunday = local_date + timedelta(days=6 - local_date.weekday())
        return ZonedClock(_localize_lenient(datetime.combine(sunday, END_OF_DAY_TIME)))

    def is_between(self, start: ClockInput, end: ClockInput) -> bool:
        """Inclusive on both ends."""
        return _as_utc(start) <= self._utc <= _as_utc(end)

    def is_after(self, other: ClockInput) -> bool:
        return self._utc > _as_utc(other)

    def is_before(self, other: ClockInput) -> bool:
        return self._utc < _as_utc(other)

    def add_minutes(self, minutes: int) -> ZonedClock:
        # Absolute minutes: across a DST change the wall clock moves by +/- 1h extra.
        return ZonedClock(self._utc + timedelta(minutes=minutes))

    def to_time_string(self) -> str:
        return self.to_local().strftime("%H:%M")

    def to_date_string(self) -> str:
        return self.to_local().strftime("%Y-%m-%d")

    def format(self, pattern: str) -> str:
        """strftime ``pattern`` applied to the local wall clock."""
        return self.to_local().strftime(pattern)

    def isoformat(self) -> str:
        return self._utc.isoformat()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ZonedClock):
            return self._utc == other._utc
        if isinstance(other, datetime):
            return self._utc == ensure_utc(other)
        return NotImplemented

    def __lt__(self, other: ClockInput) -> bool:
        return self.is_before(other)

    def __le__(self, other: ClockInput) -> bool:
        return self._utc <= _as_utc(other)

    def __hash__(self) -> int:
        return hash(self._utc)

    def __repr__(self) -> str:
        return f"ZonedClock({self.to_local().isoformat()})"
