# backend/app/schemas/schedule.py
"""
Schedule input schemas.

A schedule is an inclusive range of local dates with at most one entry per
weekday. Open days need "HH:mm" opening and closing times, opening first.
"""

import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from ..core.enums import Weekday
from ..core.zoned_clock import format_time, parse_time_of_day
from ..domain.schedule_info import LocationSchedule, ScheduleDayInfo
from ._strict_base import StrictRequestModel

DateType = datetime.date


class ScheduleDayInput(StrictRequestModel):
    weekday: Weekday
    is_open: bool = True
    opening_time: Optional[str] = None
    closing_time: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("opening_time", "closing_time")
    @classmethod
    def validate_time_format(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return format_time(v)

    @field_validator("closing_time")
    @classmethod
    def validate_open_hours(cls, v: Optional[str], info: Any) -> Optional[str]:
        data = info.data if isinstance(getattr(info, "data", None), dict) else {}
        if not data.get("is_open", True):
            return v
        opening = data.get("opening_time")
        if not opening or not v:
            raise ValueError("Open days need both an opening and a closing time")
        if parse_time_of_day(opening) >= parse_time_of_day(v):
            raise ValueError("Opening time must be before closing time")
        return v

    def to_day_info(self) -> ScheduleDayInfo:
        if not self.is_open:
            return ScheduleDayInfo(weekday=self.weekday, is_open=False)
        return ScheduleDayInfo(
            weekday=self.weekday,
            is_open=True,
            opening_time=self.opening_time,
            closing_time=self.closing_time,
        )

    def to_row(self) -> Dict[str, Any]:
        return {
            "weekday": self.weekday,
            "is_open": self.is_open,
            "opening_time": parse_time_of_day(self.opening_time) if self.is_open else None,
            "closing_time": parse_time_of_day(self.closing_time) if self.is_open else None,
        }


class ScheduleInput(StrictRequestModel):
    """A proposed or edited schedule."""

    name: str = Field(default="", max_length=255)
    start_date: DateType
    end_date: DateType
    days: List[ScheduleDayInput] = Field(default_factory=list)

    @field_validator("end_date")
    @classmethod
    def validate_date_order(cls, v: DateType, info: Any) -> DateType:
        start = info.data.get("start_date") if isinstance(info.data, dict) else None
        if start and v < start:
            raise ValueError("End date must not be before start date")
        return v

    @field_validator("days")
    @classmethod
    def validate_unique_weekdays(cls, v: List[ScheduleDayInput]) -> List[ScheduleDayInput]:
        weekdays = [day.weekday for day in v]
        if len(weekdays) != len(set(weekdays)):
            raise ValueError("Each weekday can appear at most once")
        return v

    def to_location_schedule(self, schedule_id: Optional[str] = None) -> LocationSchedule:
        return LocationSchedule(
            id=schedule_id,
            name=self.name,
            start_date=self.start_date,
            end_date=self.end_date,
            days=tuple(day.to_day_info() for day in self.days),
        )

    def day_rows(self) -> List[Dict[str, Any]]:
        return [day.to_row() for day in self.days]
