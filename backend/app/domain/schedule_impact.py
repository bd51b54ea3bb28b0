"""
How many booked parcels a schedule edit or deletion would strand.

Only regressions count: a parcel that is outside hours both before and
after the change is not attributed to the change.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from app.core.zoned_clock import ZonedClock, time_to_minutes

from .location_availability import covers, is_window_available, schedule_bounds
from .outside_hours import active_parcels
from .schedule_info import LocationSchedule, ParcelTimeInfo


def build_schedule_states(
    existing: Sequence[LocationSchedule],
    proposed: LocationSchedule,
    exclude_schedule_id: Optional[str] = None,
) -> Tuple[List[LocationSchedule], List[LocationSchedule]]:
    """
    Return ``(current, future)`` schedule sets for an edit or a creation.

    When editing, ``current`` still contains the schedule being edited and
    ``future`` replaces it with the proposed version. When creating,
    ``current`` is the stored set and ``future`` adds the proposed schedule.
    """
    others = [schedule for schedule in existing if schedule.id != exclude_schedule_id]
    if exclude_schedule_id is None:
        current = list(existing)
    else:
        original = [schedule for schedule in existing if schedule.id == exclude_schedule_id]
        current = others + original
    return current, others + [proposed]


def is_parcel_affected_by_schedule_change(
    parcel: ParcelTimeInfo,
    current: Sequence[LocationSchedule],
    future: Sequence[LocationSchedule],
) -> bool:
    available_now = is_window_available(parcel.earliest, parcel.latest, current).is_available
    if not available_now:
        return False
    return not is_window_available(parcel.earliest, parcel.latest, future).is_available


def count_parcels_affected_by_schedule_change(
    parcels: Iterable[ParcelTimeInfo],
    current: Sequence[LocationSchedule],
    future: Sequence[LocationSchedule],
    now: Union[ZonedClock, datetime],
) -> int:
    return sum(
        1
        for parcel in active_parcels(parcels, now)
        if is_parcel_affected_by_schedule_change(parcel, current, future)
    )


def _fits_open_hours(
    schedule: LocationSchedule, start: ZonedClock, end: ZonedClock
) -> bool:
    if not covers(schedule, start):
        return False
    day_config = schedule.day_for(start.weekday())
    if day_config is None or not day_config.is_open:
        return False
    return (
        time_to_minutes(start.to_time_string()) >= time_to_minutes(day_config.opening_time)
        and time_to_minutes(end.to_time_string()) <= time_to_minutes(day_config.closing_time)
    )


def count_parcels_affected_by_schedule_deletion(
    parcels: Iterable[ParcelTimeInfo],
    schedule_to_delete: LocationSchedule,
    remaining: Sequence[LocationSchedule],
    now: Union[ZonedClock, datetime],
) -> int:
    """
    Parcels inside the deleted schedule's date span that no remaining
    schedule keeps open for their whole window.
    """
    span_start, span_end = schedule_bounds(schedule_to_delete)
    others = [schedule for schedule in remaining if schedule.id != schedule_to_delete.id]
    affected = 0
    for parcel in active_parcels(parcels, now):
        start = ZonedClock(parcel.earliest)
        if not start.is_between(span_start, span_end):
            continue
        end = ZonedClock(parcel.latest)
        if not any(_fits_open_hours(schedule, start, end) for schedule in others):
            affected += 1
    return affected
