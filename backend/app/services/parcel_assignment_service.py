# backend/app/services/parcel_assignment_service.py
"""
Parcel Assignment Service

Staff actions on a single parcel: validating a proposed time, moving a
parcel to another slot, and recording pickups and no-shows.
"""

from datetime import datetime, timedelta
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.enums import ErrorCode
from ..core.exceptions import (
    AvailabilityException,
    CapacityException,
    DomainException,
    LocationNotFoundException,
    NotFoundException,
    RepositoryException,
    ValidationException,
)
from ..core.time_provider import TimeProvider
from ..core.zoned_clock import ZonedClock, ensure_utc
from ..domain.location_availability import is_window_available
from ..models.food_parcel import FoodParcel
from ..models.pickup_location import PickupLocation
from ..repositories import RepositoryFactory
from ..schemas.results import OperationResult, ParcelActionResult
from .base import BaseService
from .capacity_checker import CapacityChecker
from .location_availability_service import LocationAvailabilityService
from .outside_hours_service import OutsideHoursService

logger = logging.getLogger(__name__)


class ParcelAssignmentService(BaseService):
    def __init__(self, db: Session, time_provider: Optional[TimeProvider] = None):
        super().__init__(db, time_provider)
        self.parcel_repository = RepositoryFactory.create_food_parcel_repository(db)
        self.location_repository = RepositoryFactory.create_pickup_location_repository(db)
        self.availability_service = LocationAvailabilityService(db, self.time_provider)
        self.capacity_checker = CapacityChecker(db, self.time_provider)
        self.outside_hours_service = OutsideHoursService(db, self.time_provider)

    @BaseService.measure_operation("validate_parcel_assignment")
    def validate_parcel_assignment(
        self,
        parcel_id: str,
        location_id: str,
        earliest: datetime,
        latest: datetime,
    ) -> OperationResult:
        """Dry-run of a reschedule: every rule is checked, nothing is written."""
        try:
            parcel = self._get_parcel(parcel_id)
            location = self.location_repository.get_by_id(location_id, load_relationships=False)
            if location is None:
                raise LocationNotFoundException(location_id)
            self._validate_assignment(parcel, location, ensure_utc(earliest), ensure_utc(latest))
        except (DomainException, RepositoryException) as exc:
            return OperationResult.failure(self._as_domain_exception(exc))
        return OperationResult()

    @BaseService.measure_operation("update_food_parcel_schedule")
    def update_food_parcel_schedule(
        self, parcel_id: str, start_time: datetime
    ) -> ParcelActionResult:
        """
        Move a parcel to a new slot starting at ``start_time``.

        The window length is the location's slot duration. Capacity and
        opening hours are checked inside the transaction that writes the
        change, with the location row locked.
        """
        try:
            with self.transaction():
                parcel = self._get_parcel(parcel_id)
                location = self.location_repository.get_for_update(parcel.pickup_location_id)
                if location is None:
                    raise LocationNotFoundException(parcel.pickup_location_id)
                earliest = ensure_utc(start_time)
                latest = earliest + timedelta(minutes=location.default_slot_duration_minutes)
                self._validate_assignment(parcel, location, earliest, latest)
                self.parcel_repository.update(
                    parcel.id,
                    pickup_date_time_earliest=earliest,
                    pickup_date_time_latest=latest,
                )
                location_id = location.id
        except (DomainException, RepositoryException) as exc:
            return ParcelActionResult.failure(self._as_domain_exception(exc), parcel_id=parcel_id)

        self.log_operation(
            "update_food_parcel_schedule", parcel_id=parcel_id, earliest=earliest.isoformat()
        )
        self.outside_hours_service.refresh_counts([location_id])
        return ParcelActionResult(parcel_id=parcel_id)

    @BaseService.measure_operation("mark_picked_up")
    def mark_picked_up(self, parcel_id: str) -> ParcelActionResult:
        return self._set_status(parcel_id, is_picked_up=True)

    @BaseService.measure_operation("mark_no_show")
    def mark_no_show(self, parcel_id: str) -> ParcelActionResult:
        return self._set_status(parcel_id, no_show_at=self.time_provider.now().instant)

    def _set_status(self, parcel_id: str, **changes) -> ParcelActionResult:
        try:
            with self.transaction():
                parcel = self._get_parcel(parcel_id)
                self.parcel_repository.update(parcel.id, **changes)
                location_id = parcel.pickup_location_id
        except (DomainException, RepositoryException) as exc:
            return ParcelActionResult.failure(self._as_domain_exception(exc), parcel_id=parcel_id)

        self.log_operation("set_parcel_status", parcel_id=parcel_id, **changes)
        self.outside_hours_service.refresh_counts([location_id])
        return ParcelActionResult(parcel_id=parcel_id)

    def _get_parcel(self, parcel_id: str) -> FoodParcel:
        parcel = self.parcel_repository.get_by_id(parcel_id, load_relationships=False)
        if parcel is None:
            raise NotFoundException(
                f"Parcel {parcel_id} not found",
                code=ErrorCode.PARCEL_NOT_FOUND.value,
                details={"parcel_id": parcel_id},
                field="parcel_id",
            )
        return parcel

    def _validate_assignment(
        self,
        parcel: FoodParcel,
        location: PickupLocation,
        earliest: datetime,
        latest: datetime,
    ) -> None:
        if earliest >= latest:
            raise ValidationException(
                "Pickup window must end after it starts",
                code=ErrorCode.INVALID_TIME_WINDOW.value,
                field="pickup_date_time_latest",
            )

        start = ZonedClock(earliest)
        if not start.is_after(self.time_provider.now()):
            raise AvailabilityException(
                "Cannot schedule a pickup in the past",
                ErrorCode.PAST_TIME_SLOT,
                details={"earliest": earliest.isoformat()},
                field="pickup_date_time_earliest",
            )

        schedules = self.availability_service.get_location_schedules(location.id)
        availability = is_window_available(earliest, latest, schedules)
        if not availability.is_available:
            raise AvailabilityException(
                availability.message,
                availability.reason,
                details={
                    "location_id": location.id,
                    "date": start.to_date_string(),
                    "time": start.to_time_string(),
                },
                field="pickup_date_time_earliest",
            )

        same_day: List[FoodParcel] = self.parcel_repository.find_household_parcels_between(
            parcel.household_id,
            start.start_of_day().instant,
            start.end_of_day().instant,
            exclude_ids=[parcel.id],
        )
        if same_day:
            raise CapacityException(
                "This household already has a pickup scheduled on this day",
                ErrorCode.HOUSEHOLD_DOUBLE_BOOKING,
                details={
                    "household_id": parcel.household_id,
                    "date": start.to_date_string(),
                    "conflicting_parcel_ids": [other.id for other in same_day],
                },
                field="pickup_date_time_earliest",
            )

        self.capacity_checker.ensure_capacity(
            location, [(earliest, latest)], exclude_parcel_ids=[parcel.id]
        )
