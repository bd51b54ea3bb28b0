# backend/app/services/location_availability_service.py
"""
Location Availability Service

Answers "is this location open then?" questions from stored schedules:
date/time availability checks, the slot grid for a day, and how many
parcels are already booked in each slot.
"""

from collections import Counter
from datetime import date, datetime
import logging
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from ..core.enums import ErrorCode
from ..core.exceptions import (
    DomainException,
    LocationNotFoundException,
    RepositoryException,
    ValidationException,
)
from ..core.time_provider import TimeProvider
from ..core.zoned_clock import ZonedClock, format_time
from ..domain.location_availability import is_date_available, is_time_available, to_zoned
from ..domain.schedule_info import LocationSchedule
from ..domain.slot_planner import SlotPlan, plan_slots_for_date, slot_start_for
from ..models.pickup_location import PickupLocation
from ..repositories import RepositoryFactory
from ..schemas.results import AvailabilityCheckResult, TimeSlotCountsResult, TimeSlotsResult
from .base import BaseService

logger = logging.getLogger(__name__)

DayValue = Union[date, datetime, str, ZonedClock]


class LocationAvailabilityService(BaseService):
    def __init__(self, db: Session, time_provider: Optional[TimeProvider] = None):
        super().__init__(db, time_provider)
        self.location_repository = RepositoryFactory.create_pickup_location_repository(db)
        self.schedule_repository = RepositoryFactory.create_schedule_repository(db)
        self.parcel_repository = RepositoryFactory.create_food_parcel_repository(db)

    def get_location(self, location_id: str) -> PickupLocation:
        location = self.location_repository.get_by_id(location_id, load_relationships=False)
        if location is None:
            raise LocationNotFoundException(location_id)
        return location

    def get_location_schedules(
        self,
        location_id: str,
        exclude_schedule_id: Optional[str] = None,
        include_past: bool = False,
    ) -> List[LocationSchedule]:
        """
        Schedules of a location as plain value objects.

        By default only schedules still running today or later are loaded;
        callers that only look at future parcels never need the rest.
        """
        from_date = None if include_past else self.time_provider.today()
        schedules = self.schedule_repository.list_for_location(
            location_id, from_date=from_date, exclude_schedule_id=exclude_schedule_id
        )
        return [LocationSchedule.from_model(schedule) for schedule in schedules]

    def get_slot_duration(self, location_id: str) -> int:
        return self.get_location(location_id).default_slot_duration_minutes

    @BaseService.measure_operation("check_location_availability")
    def check_location_availability(
        self, location_id: str, day: DayValue, time_of_day: Optional[str] = None
    ) -> AvailabilityCheckResult:
        """
        Check whether a location is open on a local day, optionally at "HH:mm".

        An unavailable answer is still a successful check; ``errors`` is only
        populated for unknown locations or malformed input.
        """
        try:
            self.get_location(location_id)
            clock = _parse_day(day)
            if time_of_day is not None:
                time_of_day = _parse_time(time_of_day)
            schedules = self.get_location_schedules(location_id, include_past=True)
        except (DomainException, RepositoryException) as exc:
            return AvailabilityCheckResult.failure(self._as_domain_exception(exc))

        date_result = is_date_available(clock, schedules)
        result = AvailabilityCheckResult(
            available=date_result.is_available,
            reason=date_result.reason.value if date_result.reason else None,
            message=date_result.message,
            opening_time=date_result.opening_time,
            closing_time=date_result.closing_time,
        )
        if time_of_day is None or not date_result.is_available:
            return result

        time_result = is_time_available(clock, time_of_day, schedules)
        result.available = time_result.is_available
        result.reason = time_result.reason.value if time_result.reason else None
        result.message = time_result.message
        return result

    def get_slot_plan(
        self, location_id: str, day: DayValue, now: Optional[ZonedClock] = None
    ) -> SlotPlan:
        """Slot grid for a local day. With ``now``, slots that already started are left out."""
        location = self.get_location(location_id)
        schedules = self.get_location_schedules(location_id, include_past=True)
        return plan_slots_for_date(
            _parse_day(day), schedules, location.default_slot_duration_minutes, now=now
        )

    @BaseService.measure_operation("get_available_time_slots")
    def get_available_time_slots(self, location_id: str, day: DayValue) -> TimeSlotsResult:
        try:
            plan = self.get_slot_plan(location_id, day, now=self.time_provider.now())
            clock = _parse_day(day)
        except (DomainException, RepositoryException) as exc:
            return TimeSlotsResult.failure(self._as_domain_exception(exc))
        return TimeSlotsResult(
            date=clock.to_date_string(),
            slot_duration_minutes=plan.slot_duration_minutes,
            slots=list(plan),
        )

    @BaseService.measure_operation("get_timeslot_counts")
    def get_timeslot_counts(self, location_id: str, day: DayValue) -> TimeSlotCountsResult:
        """Booked parcels on a local day keyed by the slot their window starts in."""
        try:
            plan = self.get_slot_plan(location_id, day)
            clock = _parse_day(day)
        except (DomainException, RepositoryException) as exc:
            return TimeSlotCountsResult.failure(self._as_domain_exception(exc))

        parcels = self.parcel_repository.list_for_location_between(
            location_id, clock.start_of_day().instant, clock.end_of_day().instant
        )
        counts: Counter = Counter()
        for parcel in parcels:
            start = ZonedClock(parcel.pickup_date_time_earliest).to_time_string()
            counts[slot_start_for(start, plan) or start] += 1
        return TimeSlotCountsResult(
            date=clock.to_date_string(), counts=dict(sorted(counts.items()))
        )


def _parse_day(day: DayValue) -> ZonedClock:
    try:
        return to_zoned(day)
    except (TypeError, ValueError) as exc:
        raise ValidationException(
            f"Invalid date: {day}", code=ErrorCode.INVALID_DATE.value, field="date"
        ) from exc


def _parse_time(value: str) -> str:
    try:
        return format_time(value)
    except ValueError as exc:
        raise ValidationException(
            f"Invalid time: {value}", code=ErrorCode.INVALID_TIME.value, field="time"
        ) from exc
