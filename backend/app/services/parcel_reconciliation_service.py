# backend/app/services/parcel_reconciliation_service.py
"""
Parcel Reconciliation Service

Brings a household's stored parcels in line with the full set of pickup
windows staff want it to have. The update is all-or-nothing:

1. Diff desired windows against stored parcels (past windows are dropped).
2. Check every new window against its location's opening hours.
3. In one transaction, lock the target locations, check capacity, delete
   parcels no longer wanted, insert new ones (conflicts ignored).
4. After commit, refresh outside-hours counters of touched locations.
"""

import logging
from typing import Dict, List, Optional, Sequence, Set, Union

from sqlalchemy.orm import Session

from ..core.enums import ErrorCode
from ..core.exceptions import (
    AvailabilityException,
    DomainException,
    LocationNotFoundException,
    NotFoundException,
    RepositoryException,
)
from ..core.time_provider import TimeProvider
from ..core.zoned_clock import ZonedClock
from ..domain.location_availability import is_window_available
from ..domain.parcel_operations import (
    DesiredParcels,
    ExistingParcel,
    ParcelOperations,
    calculate_parcel_operations,
)
from ..domain.schedule_info import LocationSchedule
from ..models.food_parcel import FoodParcel
from ..repositories import RepositoryFactory
from ..schemas.food_parcel import DesiredParcelsInput
from ..schemas.results import ReconciliationResult
from .base import BaseService
from .capacity_checker import CapacityChecker
from .location_availability_service import LocationAvailabilityService
from .outside_hours_service import OutsideHoursService

logger = logging.getLogger(__name__)


class ParcelReconciliationService(BaseService):
    def __init__(self, db: Session, time_provider: Optional[TimeProvider] = None):
        super().__init__(db, time_provider)
        self.location_repository = RepositoryFactory.create_pickup_location_repository(db)
        self.parcel_repository = RepositoryFactory.create_food_parcel_repository(db)
        self.household_repository = RepositoryFactory.create_household_repository(db)
        self.availability_service = LocationAvailabilityService(db, self.time_provider)
        self.capacity_checker = CapacityChecker(db, self.time_provider)
        self.outside_hours_service = OutsideHoursService(db, self.time_provider)

    @BaseService.measure_operation("update_household_parcels")
    def update_household_parcels(
        self,
        household_id: str,
        desired: Sequence[Union[DesiredParcelsInput, DesiredParcels]],
    ) -> ReconciliationResult:
        groups = [
            group.to_desired() if isinstance(group, DesiredParcelsInput) else group
            for group in desired
        ]
        try:
            existing = self._load_existing(household_id, groups)
            operations = calculate_parcel_operations(
                groups,
                [_to_existing(parcel) for parcel in existing],
                self.time_provider.now(),
            )
            self._validate_opening_hours(operations)
            inserted_ids = self._write(household_id, operations)
        except (DomainException, RepositoryException) as exc:
            return ReconciliationResult.failure(self._as_domain_exception(exc))

        deleted = set(operations.to_delete)
        touched: Set[str] = operations.location_ids | {
            parcel.pickup_location_id for parcel in existing if parcel.id in deleted
        }
        self.log_operation(
            "update_household_parcels",
            household_id=household_id,
            inserted=len(inserted_ids),
            deleted=len(operations.to_delete),
            skipped_past=len(operations.skipped_past),
        )
        self.outside_hours_service.refresh_counts(touched)
        return ReconciliationResult(
            inserted_ids=inserted_ids,
            deleted_ids=list(operations.to_delete),
            unchanged_ids=list(operations.unchanged),
            skipped_past_count=len(operations.skipped_past),
        )

    def _load_existing(self, household_id: str, groups: List[DesiredParcels]) -> List[FoodParcel]:
        if self.household_repository.get_by_id(household_id, load_relationships=False) is None:
            raise NotFoundException(
                f"Household {household_id} not found",
                code=ErrorCode.HOUSEHOLD_NOT_FOUND.value,
                details={"household_id": household_id},
                field="household_id",
            )
        for index, group in enumerate(groups):
            location = self.location_repository.get_by_id(
                group.location_id, load_relationships=False
            )
            if location is None:
                raise LocationNotFoundException(
                    group.location_id, field=f"parcels.{index}.location_id"
                )
        return self.parcel_repository.list_for_household(household_id)

    def _validate_opening_hours(self, operations: ParcelOperations) -> None:
        schedules: Dict[str, List[LocationSchedule]] = {
            location_id: self.availability_service.get_location_schedules(location_id)
            for location_id in operations.location_ids
        }
        for insert in operations.to_insert:
            availability = is_window_available(
                insert.earliest, insert.latest, schedules[insert.location_id]
            )
            if not availability.is_available:
                start = ZonedClock(insert.earliest)
                raise AvailabilityException(
                    availability.message,
                    availability.reason,
                    details={
                        "location_id": insert.location_id,
                        "date": start.to_date_string(),
                        "time": start.to_time_string(),
                        "earliest": insert.earliest.isoformat(),
                        "latest": insert.latest.isoformat(),
                    },
                    field="windows",
                )

    def _write(self, household_id: str, operations: ParcelOperations) -> List[str]:
        if operations.is_noop:
            return []
        with self.transaction():
            for location in self.location_repository.lock_locations(operations.location_ids):
                self.capacity_checker.ensure_capacity(
                    location,
                    [
                        (insert.earliest, insert.latest)
                        for insert in operations.to_insert
                        if insert.location_id == location.id
                    ],
                    exclude_parcel_ids=operations.to_delete,
                )
            self.parcel_repository.delete_by_ids(operations.to_delete)
            return self.parcel_repository.insert_parcels(household_id, operations.to_insert)


def _to_existing(parcel: FoodParcel) -> ExistingParcel:
    return ExistingParcel(
        id=parcel.id,
        location_id=parcel.pickup_location_id,
        earliest=parcel.pickup_date_time_earliest,
        latest=parcel.pickup_date_time_latest,
        is_picked_up=bool(parcel.is_picked_up),
    )
