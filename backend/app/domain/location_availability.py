"""
Opening-hours resolution for a pickup location.

A location may have several dated schedules whose ranges overlap. A local
date is available when ANY schedule covering it is open on that weekday.
Time checks use the first covering schedule that is open that day; opening
hours of several open schedules are not merged.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Iterator, Optional, Sequence, Tuple, Union

from app.core.enums import AvailabilityReason, Weekday
from app.core.zoned_clock import ZonedClock, parse_time_of_day, time_to_minutes

from .schedule_info import LocationSchedule, ScheduleDayInfo

DayInput = Union[ZonedClock, datetime, date, str]


@dataclass(frozen=True)
class DateAvailability:
    is_available: bool
    reason: Optional[AvailabilityReason] = None
    message: str = ""
    opening_time: Optional[str] = None
    closing_time: Optional[str] = None
    schedule_id: Optional[str] = None


@dataclass(frozen=True)
class TimeAvailability:
    is_available: bool
    reason: Optional[AvailabilityReason] = None
    message: str = ""


@dataclass(frozen=True)
class TimeRange:
    earliest_time: Optional[str] = None
    latest_time: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.earliest_time is not None and self.latest_time is not None


def to_zoned(day: DayInput) -> ZonedClock:
    """
    Interpret a day argument.

    ``date`` objects and "YYYY-MM-DD" strings name a local calendar day;
    datetimes and full ISO timestamps name an instant.
    """
    if isinstance(day, ZonedClock):
        return day
    if isinstance(day, datetime):
        return ZonedClock(day)
    if isinstance(day, date):
        return ZonedClock.for_day(day)
    if isinstance(day, str):
        if len(day.strip()) == 10:
            try:
                return ZonedClock.for_day(date.fromisoformat(day.strip()))
            except ValueError as exc:
                raise ValueError(f"Invalid date: {day!r}") from exc
        return ZonedClock(day)
    raise TypeError(f"Unsupported day value: {type(day).__name__}")


def schedule_bounds(schedule: LocationSchedule) -> Tuple[ZonedClock, ZonedClock]:
    """Start of the first local day and end of the last local day of a schedule."""
    return (
        ZonedClock.for_day(schedule.start_date),
        ZonedClock.for_day(schedule.end_date).end_of_day(),
    )


def covers(schedule: LocationSchedule, moment: ZonedClock) -> bool:
    start, end = schedule_bounds(schedule)
    return moment.is_between(start, end)


def covering_schedules(
    day: DayInput, schedules: Iterable[LocationSchedule]
) -> Iterator[LocationSchedule]:
    day_start = to_zoned(day).start_of_day()
    return (schedule for schedule in schedules if covers(schedule, day_start))


def find_open_day(
    day: DayInput, schedules: Iterable[LocationSchedule]
) -> Optional[Tuple[LocationSchedule, ScheduleDayInfo]]:
    """First covering schedule that is open on the day's weekday, with its day entry."""
    weekday = to_zoned(day).weekday()
    for schedule in covering_schedules(day, schedules):
        day_config = schedule.day_for(weekday)
        if day_config is not None and day_config.is_open:
            return schedule, day_config
    return None


def is_date_available(day: DayInput, schedules: Sequence[LocationSchedule]) -> DateAvailability:
    clock = to_zoned(day)
    match = find_open_day(clock, schedules)
    if match is not None:
        schedule, day_config = match
        return DateAvailability(
            is_available=True,
            opening_time=day_config.opening_time,
            closing_time=day_config.closing_time,
            schedule_id=schedule.id,
        )

    weekday = clock.weekday()
    if any(True for _ in covering_schedules(clock, schedules)):
        return DateAvailability(
            is_available=False,
            reason=AvailabilityReason.LOCATION_CLOSED,
            message=f"This location is closed on {_plural(weekday)}",
        )
    return DateAvailability(
        is_available=False,
        reason=AvailabilityReason.NO_SCHEDULE,
        message="This location has no scheduled opening hours for this date",
    )


def is_time_available(
    day: DayInput, time_of_day: str, schedules: Sequence[LocationSchedule]
) -> TimeAvailability:
    """
    Whether "HH:mm" on the given local day falls within opening hours.

    Both opening and closing times are inclusive.
    """
    minutes = time_to_minutes(parse_time_of_day(time_of_day))
    clock = to_zoned(day)
    availability = is_date_available(clock, schedules)
    if not availability.is_available:
        return TimeAvailability(False, availability.reason, availability.message)

    opening = time_to_minutes(availability.opening_time)
    closing = time_to_minutes(availability.closing_time)
    if minutes < opening or minutes > closing:
        return TimeAvailability(
            False,
            AvailabilityReason.OUTSIDE_OPERATING_HOURS,
            f"This location is only open from {availability.opening_time} to "
            f"{availability.closing_time} on {_plural(clock.weekday())}",
        )
    return TimeAvailability(True)


def is_instant_available(
    moment: Union[ZonedClock, datetime], schedules: Sequence[LocationSchedule]
) -> TimeAvailability:
    clock = ZonedClock(moment)
    return is_time_available(clock, clock.to_time_string(), schedules)


def is_window_available(
    earliest: Union[ZonedClock, datetime],
    latest: Union[ZonedClock, datetime],
    schedules: Sequence[LocationSchedule],
) -> TimeAvailability:
    """Both boundary instants of a pickup window must be within opening hours."""
    start = is_instant_available(earliest, schedules)
    if not start.is_available:
        return start
    return is_instant_available(latest, schedules)


def get_available_time_range(day: DayInput, schedules: Sequence[LocationSchedule]) -> TimeRange:
    availability = is_date_available(day, schedules)
    if not availability.is_available:
        return TimeRange()
    return TimeRange(availability.opening_time, availability.closing_time)


def _plural(weekday: Weekday) -> str:
    return f"{weekday.value.capitalize()}s"
