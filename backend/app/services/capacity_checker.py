# backend/app/services/capacity_checker.py
"""
Capacity Checker Service

Enforces the per-day and per-slot parcel limits of a location. Callers run
these checks inside their write transaction after locking the location
row, so two concurrent bookings cannot both squeeze into the last place.
"""

from collections import Counter
from datetime import datetime
import logging
from typing import Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from ..core.enums import ErrorCode
from ..core.exceptions import CapacityException
from ..core.time_provider import TimeProvider
from ..core.zoned_clock import ZonedClock
from ..models.pickup_location import PickupLocation
from ..repositories import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

Window = Tuple[datetime, datetime]


class CapacityChecker(BaseService):
    def __init__(self, db: Session, time_provider: Optional[TimeProvider] = None):
        super().__init__(db, time_provider)
        self.parcel_repository = RepositoryFactory.create_food_parcel_repository(db)

    def ensure_capacity(
        self,
        location: PickupLocation,
        windows: Sequence[Window],
        exclude_parcel_ids: Sequence[str] = (),
    ) -> None:
        """
        Raise CapacityException if adding ``windows`` would exceed a limit.

        ``exclude_parcel_ids`` are stored parcels about to be removed or moved
        in the same transaction; they do not count against the limits.
        """
        if not windows:
            return
        self._check_daily_capacity(location, windows, exclude_parcel_ids)
        self._check_slot_capacity(location, windows, exclude_parcel_ids)

    def _check_daily_capacity(
        self, location: PickupLocation, windows: Sequence[Window], exclude_ids: Sequence[str]
    ) -> None:
        maximum = location.parcels_max_per_day
        if maximum is None:
            return
        planned_per_day = Counter(ZonedClock(earliest).local_date() for earliest, _ in windows)
        for day, planned in sorted(planned_per_day.items()):
            day_start = ZonedClock.for_day(day)
            current = self.parcel_repository.count_for_location_between(
                location.id, day_start.instant, day_start.end_of_day().instant, exclude_ids
            )
            if current + planned > maximum:
                raise CapacityException(
                    f"{location.name} already has {current} of {maximum} parcels "
                    f"on {day.isoformat()}",
                    ErrorCode.MAX_DAILY_CAPACITY_REACHED,
                    details={
                        "location_id": location.id,
                        "date": day.isoformat(),
                        "current": current,
                        "requested": planned,
                        "maximum": maximum,
                    },
                    field="pickup_date_time_earliest",
                )

    def _check_slot_capacity(
        self, location: PickupLocation, windows: Sequence[Window], exclude_ids: Sequence[str]
    ) -> None:
        maximum = location.parcels_max_per_slot
        if maximum is None:
            return
        for earliest, latest in windows:
            current = self.parcel_repository.count_overlapping(
                location.id, earliest, latest, exclude_ids
            )
            # Includes the window itself.
            planned = sum(
                1
                for other_start, other_end in windows
                if other_start < latest and other_end > earliest
            )
            if current + planned > maximum:
                slot = ZonedClock(earliest)
                raise CapacityException(
                    f"The {slot.to_time_string()} slot on {slot.to_date_string()} is full",
                    ErrorCode.MAX_SLOT_CAPACITY_REACHED,
                    details={
                        "location_id": location.id,
                        "date": slot.to_date_string(),
                        "time": slot.to_time_string(),
                        "current": current,
                        "requested": planned,
                        "maximum": maximum,
                    },
                    field="pickup_date_time_earliest",
                )
