# backend/app/schemas/food_parcel.py
"""Food parcel request schemas."""

import datetime
from typing import Any, List

from pydantic import Field, field_validator

from ..core.zoned_clock import ensure_utc
from ..domain.parcel_operations import DesiredParcels, TimeWindow
from ._strict_base import StrictRequestModel

DateTimeType = datetime.datetime


class TimeWindowInput(StrictRequestModel):
    """A pickup window; naive timestamps are read as UTC."""

    earliest: DateTimeType
    latest: DateTimeType

    @field_validator("earliest", "latest")
    @classmethod
    def normalize_to_utc(cls, v: DateTimeType) -> DateTimeType:
        return ensure_utc(v)

    @field_validator("latest")
    @classmethod
    def validate_window_order(cls, v: DateTimeType, info: Any) -> DateTimeType:
        earliest = info.data.get("earliest") if isinstance(info.data, dict) else None
        if earliest and v <= earliest:
            raise ValueError("Pickup window must end after it starts")
        return v

    def to_window(self) -> TimeWindow:
        return TimeWindow(self.earliest, self.latest)


class DesiredParcelsInput(StrictRequestModel):
    """All windows a household should have at one location."""

    location_id: str = Field(min_length=1, max_length=26)
    windows: List[TimeWindowInput] = Field(default_factory=list)

    def to_desired(self) -> DesiredParcels:
        return DesiredParcels(
            location_id=self.location_id,
            windows=tuple(window.to_window() for window in self.windows),
        )


class RescheduleRequest(StrictRequestModel):
    start_time: DateTimeType

    @field_validator("start_time")
    @classmethod
    def normalize_to_utc(cls, v: DateTimeType) -> DateTimeType:
        return ensure_utc(v)
