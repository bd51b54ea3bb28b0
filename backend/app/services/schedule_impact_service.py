# backend/app/services/schedule_impact_service.py
"""
Schedule Impact Service

Before a schedule is created, edited or deleted, tells staff how many
booked parcels would end up outside opening hours because of it.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.enums import ErrorCode
from ..core.exceptions import DomainException, NotFoundException, RepositoryException
from ..core.time_provider import TimeProvider
from ..domain.schedule_impact import (
    build_schedule_states,
    count_parcels_affected_by_schedule_change,
    count_parcels_affected_by_schedule_deletion,
)
from ..domain.schedule_info import LocationSchedule, ParcelTimeInfo
from ..models.schedule import PickupLocationSchedule
from ..repositories import RepositoryFactory
from ..schemas.results import ScheduleImpactResult
from ..schemas.schedule import ScheduleInput
from .base import BaseService
from .location_availability_service import LocationAvailabilityService

logger = logging.getLogger(__name__)


class ScheduleImpactService(BaseService):
    def __init__(self, db: Session, time_provider: Optional[TimeProvider] = None):
        super().__init__(db, time_provider)
        self.schedule_repository = RepositoryFactory.create_schedule_repository(db)
        self.parcel_repository = RepositoryFactory.create_food_parcel_repository(db)
        self.availability_service = LocationAvailabilityService(db, self.time_provider)

    @BaseService.measure_operation("check_parcels_affected_by_schedule_change")
    def check_parcels_affected_by_schedule_change(
        self,
        location_id: str,
        proposed: ScheduleInput,
        exclude_schedule_id: Optional[str] = None,
    ) -> ScheduleImpactResult:
        """
        Count active parcels that fit today's schedules but not the proposed set.

        Pass ``exclude_schedule_id`` when ``proposed`` is an edit of an
        existing schedule; omit it for a new schedule.
        """
        try:
            count = self.count_affected_by_change(location_id, proposed, exclude_schedule_id)
        except (DomainException, RepositoryException) as exc:
            return ScheduleImpactResult.failure(self._as_domain_exception(exc))
        return ScheduleImpactResult(affected_count=count)

    @BaseService.measure_operation("check_parcels_affected_by_schedule_deletion")
    def check_parcels_affected_by_schedule_deletion(
        self, location_id: str, schedule_id: str
    ) -> ScheduleImpactResult:
        try:
            count = self.count_affected_by_deletion(location_id, schedule_id)
        except (DomainException, RepositoryException) as exc:
            return ScheduleImpactResult.failure(self._as_domain_exception(exc))
        return ScheduleImpactResult(affected_count=count)

    def count_affected_by_change(
        self,
        location_id: str,
        proposed: ScheduleInput,
        exclude_schedule_id: Optional[str] = None,
    ) -> int:
        self.availability_service.get_location(location_id)
        if exclude_schedule_id is not None:
            self.get_schedule(location_id, exclude_schedule_id)
        existing = self.availability_service.get_location_schedules(location_id)
        current, future = build_schedule_states(
            existing, proposed.to_location_schedule(exclude_schedule_id), exclude_schedule_id
        )
        now = self.time_provider.now()
        return count_parcels_affected_by_schedule_change(
            self._active_parcels(location_id), current, future, now
        )

    def count_affected_by_deletion(self, location_id: str, schedule_id: str) -> int:
        self.availability_service.get_location(location_id)
        schedule = self.get_schedule(location_id, schedule_id)
        remaining = self.availability_service.get_location_schedules(
            location_id, exclude_schedule_id=schedule_id
        )
        now = self.time_provider.now()
        return count_parcels_affected_by_schedule_deletion(
            self._active_parcels(location_id), LocationSchedule.from_model(schedule), remaining, now
        )

    def get_schedule(self, location_id: str, schedule_id: str) -> PickupLocationSchedule:
        schedule = self.schedule_repository.get_by_id(schedule_id)
        if schedule is None or schedule.pickup_location_id != location_id:
            raise NotFoundException(
                f"Schedule {schedule_id} not found for location {location_id}",
                code=ErrorCode.SCHEDULE_NOT_FOUND.value,
                details={"location_id": location_id, "schedule_id": schedule_id},
                field="schedule_id",
            )
        return schedule

    def _active_parcels(self, location_id: str) -> List[ParcelTimeInfo]:
        now = self.time_provider.now()
        return [
            ParcelTimeInfo.from_model(parcel)
            for parcel in self.parcel_repository.list_active_for_location(location_id, now.instant)
        ]
