# backend/app/services/outside_hours_service.py
"""
Outside Hours Service

Keeps ``PickupLocation.outside_hours_count`` in step with reality. The
counter is a cache: it is recomputed from scratch after every committed
schedule or parcel change and can be recomputed at any time.
"""

import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException, ServiceException
from ..core.time_provider import TimeProvider
from ..domain.outside_hours import filter_outside_hours_parcels
from ..domain.schedule_info import ParcelTimeInfo
from ..models.food_parcel import FoodParcel
from ..repositories import RepositoryFactory
from .base import BaseService
from .location_availability_service import LocationAvailabilityService

logger = logging.getLogger(__name__)


class OutsideHoursService(BaseService):
    def __init__(self, db: Session, time_provider: Optional[TimeProvider] = None):
        super().__init__(db, time_provider)
        self.location_repository = RepositoryFactory.create_pickup_location_repository(db)
        self.parcel_repository = RepositoryFactory.create_food_parcel_repository(db)
        self.availability_service = LocationAvailabilityService(db, self.time_provider)

    @BaseService.measure_operation("get_outside_hours_parcels")
    def get_outside_hours_parcels(self, location_id: str) -> List[FoodParcel]:
        """Active parcels at a location whose start or end is outside opening hours."""
        now = self.time_provider.now()
        parcels = self.parcel_repository.list_active_for_location(location_id, now.instant)
        schedules = self.availability_service.get_location_schedules(location_id)
        outside_ids = {
            parcel.id
            for parcel in filter_outside_hours_parcels(
                [ParcelTimeInfo.from_model(parcel) for parcel in parcels], schedules, now
            )
        }
        return [parcel for parcel in parcels if parcel.id in outside_ids]

    @BaseService.measure_operation("recompute_outside_hours_count")
    def recompute_outside_hours_count(self, location_id: str) -> int:
        count = len(self.get_outside_hours_parcels(location_id))
        with self.transaction():
            self.location_repository.set_outside_hours_count(location_id, count)
        self.log_operation("recompute_outside_hours_count", location_id=location_id, count=count)
        return count

    def refresh_counts(self, location_ids: Iterable[str]) -> Dict[str, Optional[int]]:
        """
        Recompute counters after another operation has committed.

        A failure here leaves a stale counter but must not turn the already
        committed operation into a failure, so it is logged and reported as
        ``None`` for that location.
        """
        counts: Dict[str, Optional[int]] = {}
        for location_id in sorted(set(location_ids)):
            try:
                counts[location_id] = self.recompute_outside_hours_count(location_id)
            except (ServiceException, RepositoryException):
                self.logger.exception(
                    "Failed to recompute outside-hours count for location %s", location_id
                )
                counts[location_id] = None
        return counts

    def get_total_outside_hours_count(self) -> int:
        return self.location_repository.total_outside_hours_count()
