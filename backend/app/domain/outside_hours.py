"""Detection of active parcels that fall outside a location's opening hours."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Sequence, Union

from app.core.zoned_clock import ZonedClock, ensure_utc

from .location_availability import is_window_available
from .schedule_info import LocationSchedule, ParcelTimeInfo


def _instant(now: Union[ZonedClock, datetime]) -> datetime:
    return now.instant if isinstance(now, ZonedClock) else ensure_utc(now)


def is_active_parcel(parcel: ParcelTimeInfo, now: Union[ZonedClock, datetime]) -> bool:
    """Not picked up and starting strictly after ``now``."""
    return not parcel.is_picked_up and parcel.earliest > _instant(now)


def active_parcels(
    parcels: Iterable[ParcelTimeInfo], now: Union[ZonedClock, datetime]
) -> List[ParcelTimeInfo]:
    return [parcel for parcel in parcels if is_active_parcel(parcel, now)]


def is_parcel_outside_opening_hours(
    parcel: ParcelTimeInfo, schedules: Sequence[LocationSchedule]
) -> bool:
    return not is_window_available(parcel.earliest, parcel.latest, schedules).is_available


def filter_outside_hours_parcels(
    parcels: Iterable[ParcelTimeInfo],
    schedules: Sequence[LocationSchedule],
    now: Union[ZonedClock, datetime],
) -> List[ParcelTimeInfo]:
    return [
        parcel
        for parcel in active_parcels(parcels, now)
        if is_parcel_outside_opening_hours(parcel, schedules)
    ]


def count_outside_hours_parcels(
    parcels: Iterable[ParcelTimeInfo],
    schedules: Sequence[LocationSchedule],
    now: Union[ZonedClock, datetime],
) -> int:
    return len(filter_outside_hours_parcels(parcels, schedules, now))
