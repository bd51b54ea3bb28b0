# backend/app/services/schedule_service.py
"""
Schedule Service

Creates, edits and deletes location schedules. Each mutation reports how
many booked parcels it strands (computed before the write) and refreshes
the location's outside-hours counter after commit.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core.exceptions import DomainException, RepositoryException
from ..core.time_provider import TimeProvider
from ..repositories import RepositoryFactory
from ..schemas.results import ScheduleMutationResult
from ..schemas.schedule import ScheduleInput
from .base import BaseService
from .location_availability_service import LocationAvailabilityService
from .outside_hours_service import OutsideHoursService
from .schedule_impact_service import ScheduleImpactService

logger = logging.getLogger(__name__)


class ScheduleService(BaseService):
    def __init__(self, db: Session, time_provider: Optional[TimeProvider] = None):
        super().__init__(db, time_provider)
        self.schedule_repository = RepositoryFactory.create_schedule_repository(db)
        self.availability_service = LocationAvailabilityService(db, self.time_provider)
        self.impact_service = ScheduleImpactService(db, self.time_provider)
        self.outside_hours_service = OutsideHoursService(db, self.time_provider)

    @BaseService.measure_operation("create_schedule")
    def create_schedule(self, location_id: str, data: ScheduleInput) -> ScheduleMutationResult:
        try:
            self.availability_service.get_location(location_id)
            affected = self.impact_service.count_affected_by_change(location_id, data)
            with self.transaction():
                schedule = self.schedule_repository.create_schedule(
                    location_id,
                    data.name or _default_name(data),
                    data.start_date,
                    data.end_date,
                    data.day_rows(),
                )
                schedule_id = schedule.id
        except (DomainException, RepositoryException) as exc:
            return ScheduleMutationResult.failure(self._as_domain_exception(exc))

        self.log_operation("create_schedule", location_id=location_id, schedule_id=schedule_id)
        return self._finish(location_id, schedule_id, affected)

    @BaseService.measure_operation("update_schedule")
    def update_schedule(
        self, location_id: str, schedule_id: str, data: ScheduleInput
    ) -> ScheduleMutationResult:
        try:
            schedule = self.impact_service.get_schedule(location_id, schedule_id)
            affected = self.impact_service.count_affected_by_change(
                location_id, data, exclude_schedule_id=schedule_id
            )
            with self.transaction():
                self.schedule_repository.update_schedule(
                    schedule,
                    data.name or schedule.name,
                    data.start_date,
                    data.end_date,
                    data.day_rows(),
                )
        except (DomainException, RepositoryException) as exc:
            return ScheduleMutationResult.failure(self._as_domain_exception(exc))

        self.log_operation("update_schedule", location_id=location_id, schedule_id=schedule_id)
        return self._finish(location_id, schedule_id, affected)

    @BaseService.measure_operation("delete_schedule")
    def delete_schedule(self, location_id: str, schedule_id: str) -> ScheduleMutationResult:
        try:
            affected = self.impact_service.count_affected_by_deletion(location_id, schedule_id)
            with self.transaction():
                self.schedule_repository.delete(schedule_id)
        except (DomainException, RepositoryException) as exc:
            return ScheduleMutationResult.failure(self._as_domain_exception(exc))

        self.log_operation("delete_schedule", location_id=location_id, schedule_id=schedule_id)
        return self._finish(location_id, schedule_id, affected)

    def _finish(self, location_id: str, schedule_id: str, affected: int) -> ScheduleMutationResult:
        if affected:
            self.logger.warning(
                "Schedule change at location %s leaves %d parcel(s) outside opening hours",
                location_id,
                affected,
            )
        counts = self.outside_hours_service.refresh_counts([location_id])
        return ScheduleMutationResult(
            schedule_id=schedule_id,
            affected_count=affected,
            outside_hours_count=counts.get(location_id),
        )


def _default_name(data: ScheduleInput) -> str:
    return f"{data.start_date.isoformat()} to {data.end_date.isoformat()}"
