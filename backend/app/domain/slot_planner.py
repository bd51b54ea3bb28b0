"""
Pickup slot grid for one local day.

Slots start at the opening time and advance by the slot duration. A slot is
offered only when it ends no later than the closing time, so a 15-minute
grid for 10:00-11:00 is 10:00, 10:15, 10:30, 10:45.

When a plan is given ``now``, slots that do not start after it are left out:
a past day has no slots, today keeps only the slots still ahead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterator, Optional, Sequence

from app.core.config import settings
from app.core.zoned_clock import ZonedClock, minutes_to_time_string, time_to_minutes

from .location_availability import DayInput, TimeRange, get_available_time_range, to_zoned
from .schedule_info import LocationSchedule


def _default_slot_duration() -> int:
    return settings.default_slot_duration_minutes


@dataclass(frozen=True)
class SlotPlan:
    """Lazy, restartable sequence of "HH:mm" slot start times."""

    earliest_time: Optional[str]
    latest_time: Optional[str]
    slot_duration_minutes: int = field(default_factory=_default_slot_duration)
    day: Optional[date] = None
    now: Optional[ZonedClock] = None

    def __post_init__(self) -> None:
        if self.slot_duration_minutes <= 0:
            raise ValueError("Slot duration must be a positive number of minutes")
        if self.now is not None and self.day is None:
            raise ValueError("A plan filtered by 'now' needs the day it is for")

    def _all_slots(self) -> Iterator[int]:
        if not self.earliest_time or not self.latest_time:
            return
        closing = time_to_minutes(self.latest_time)
        current = time_to_minutes(self.earliest_time)
        while current + self.slot_duration_minutes <= closing:
            yield current
            current += self.slot_duration_minutes

    def _first_bookable_minute(self) -> Optional[int]:
        """Local minute-of-day a slot must be strictly after; None keeps every slot."""
        if self.now is None:
            return None
        today = self.now.local_date()
        if self.day > today:
            return None
        if self.day < today:
            return 24 * 60
        # A slot starting in the current minute has already started.
        local_now = self.now.to_local()
        return local_now.hour * 60 + local_now.minute

    def __iter__(self) -> Iterator[str]:
        cutoff = self._first_bookable_minute()
        for start in self._all_slots():
            if cutoff is not None and start <= cutoff:
                continue
            yield minutes_to_time_string(start)

    def __len__(self) -> int:
        return sum(1 for _ in self)


def plan_slots(
    time_range: TimeRange,
    slot_duration_minutes: Optional[int] = None,
    day: Optional[date] = None,
    now: Optional[ZonedClock] = None,
) -> SlotPlan:
    return SlotPlan(
        time_range.earliest_time,
        time_range.latest_time,
        slot_duration_minutes or settings.default_slot_duration_minutes,
        day=day,
        now=now,
    )


def plan_slots_for_date(
    day: DayInput,
    schedules: Sequence[LocationSchedule],
    slot_duration_minutes: Optional[int] = None,
    now: Optional[ZonedClock] = None,
) -> SlotPlan:
    """Slot grid for a local day; pass ``now`` to drop slots that already started."""
    return plan_slots(
        get_available_time_range(day, schedules),
        slot_duration_minutes,
        day=to_zoned(day).local_date(),
        now=now,
    )


def slot_start_for(time_of_day: str, plan: SlotPlan) -> Optional[str]:
    """The slot whose interval contains ``time_of_day``, if any."""
    minutes = time_to_minutes(time_of_day)
    for slot in plan:
        start = time_to_minutes(slot)
        if start <= minutes < start + plan.slot_duration_minutes:
            return slot
    return None
