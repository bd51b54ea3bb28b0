# backend/app/core/enums.py
"""Enumerations shared across the scheduling domain."""

from enum import Enum


class Weekday(str, Enum):
    """Days of the week as stored on schedule days."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_index(cls, index: int) -> "Weekday":
        """Map a zero-based local weekday index (0 = Monday) to a Weekday."""
        if not 0 <= index <= 6:
            raise ValueError(f"Weekday index out of range: {index}")
        return _WEEKDAY_ORDER[index]

    @property
    def index(self) -> int:
        return _WEEKDAY_ORDER.index(self)


_WEEKDAY_ORDER = (
    Weekday.MONDAY,
    Weekday.TUESDAY,
    Weekday.WEDNESDAY,
    Weekday.THURSDAY,
    Weekday.FRIDAY,
    Weekday.SATURDAY,
    Weekday.SUNDAY,
)


class AvailabilityReason(str, Enum):
    """Why a date or time at a location is not available."""

    NO_SCHEDULE = "NO_SCHEDULE"
    LOCATION_CLOSED = "LOCATION_CLOSED"
    OUTSIDE_OPERATING_HOURS = "OUTSIDE_OPERATING_HOURS"


class ErrorCode(str, Enum):
    """Machine-readable error codes returned in operation results."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_DATE = "INVALID_DATE"
    INVALID_TIME = "INVALID_TIME"
    INVALID_TIME_WINDOW = "INVALID_TIME_WINDOW"
    INVALID_SCHEDULE = "INVALID_SCHEDULE"
    LOCATION_NOT_FOUND = "LOCATION_NOT_FOUND"
    SCHEDULE_NOT_FOUND = "SCHEDULE_NOT_FOUND"
    PARCEL_NOT_FOUND = "PARCEL_NOT_FOUND"
    HOUSEHOLD_NOT_FOUND = "HOUSEHOLD_NOT_FOUND"
    NO_SCHEDULE = "NO_SCHEDULE"
    LOCATION_CLOSED = "LOCATION_CLOSED"
    OUTSIDE_OPERATING_HOURS = "OUTSIDE_OPERATING_HOURS"
    PAST_TIME_SLOT = "PAST_TIME_SLOT"
    MAX_DAILY_CAPACITY_REACHED = "MAX_DAILY_CAPACITY_REACHED"
    MAX_SLOT_CAPACITY_REACHED = "MAX_SLOT_CAPACITY_REACHED"
    HOUSEHOLD_DOUBLE_BOOKING = "HOUSEHOLD_DOUBLE_BOOKING"
    INTERNAL_ERROR = "INTERNAL_ERROR"
