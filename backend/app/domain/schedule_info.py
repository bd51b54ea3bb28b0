"""Plain value types the scheduling rules operate on."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TYPE_CHECKING, Optional, Tuple

from app.core.enums import Weekday
from app.core.zoned_clock import ensure_utc, format_time, time_to_minutes

if TYPE_CHECKING:
    from app.models.food_parcel import FoodParcel
    from app.models.schedule import PickupLocationSchedule


@dataclass(frozen=True)
class ScheduleDayInfo:
    weekday: Weekday
    is_open: bool
    opening_time: Optional[str] = None
    closing_time: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.is_open:
            return
        if not self.opening_time or not self.closing_time:
            raise ValueError(f"Open day {self.weekday.value} needs opening and closing times")
        if time_to_minutes(self.opening_time) >= time_to_minutes(self.closing_time):
            raise ValueError(
                f"Opening time must be before closing time on {self.weekday.value}"
            )


@dataclass(frozen=True)
class LocationSchedule:
    start_date: date
    end_date: date
    days: Tuple[ScheduleDayInfo, ...] = ()
    id: Optional[str] = None
    name: str = ""

    def __post_init__(self) -> None:
        if self.start_date > self.end_date:
            raise ValueError("Schedule start date must not be after its end date")
        weekdays = [day.weekday for day in self.days]
        if len(weekdays) != len(set(weekdays)):
            raise ValueError("A schedule can only have one entry per weekday")

    def day_for(self, weekday: Weekday) -> Optional[ScheduleDayInfo]:
        for day in self.days:
            if day.weekday == weekday:
                return day
        return None

    @classmethod
    def from_model(cls, schedule: "PickupLocationSchedule") -> LocationSchedule:
        return cls(
            id=schedule.id,
            name=schedule.name,
            start_date=schedule.start_date,
            end_date=schedule.end_date,
            days=tuple(
                ScheduleDayInfo(
                    weekday=Weekday(day.weekday),
                    is_open=bool(day.is_open),
                    opening_time=format_time(day.opening_time),
                    closing_time=format_time(day.closing_time),
                )
                for day in schedule.days
            ),
        )


@dataclass(frozen=True)
class ParcelTimeInfo:
    id: str
    earliest: datetime
    latest: datetime
    is_picked_up: bool = False
    location_id: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "earliest", ensure_utc(self.earliest))
        object.__setattr__(self, "latest", ensure_utc(self.latest))

    @classmethod
    def from_model(cls, parcel: "FoodParcel") -> ParcelTimeInfo:
        return cls(
            id=parcel.id,
            earliest=parcel.pickup_date_time_earliest,
            latest=parcel.pickup_date_time_latest,
            is_picked_up=bool(parcel.is_picked_up),
            location_id=parcel.pickup_location_id,
        )
