# backend/app/repositories/schedule_repository.py
"""Data access for location schedules and their weekday rows."""

from datetime import date
import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, selectinload

from ..core.exceptions import RepositoryException
from ..models.schedule import PickupLocationSchedule, PickupLocationScheduleDay
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ScheduleRepository(BaseRepository[PickupLocationSchedule]):
    def __init__(self, db: Session):
        super().__init__(db, PickupLocationSchedule)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(selectinload(PickupLocationSchedule.days))

    def list_for_location(
        self,
        location_id: str,
        from_date: Optional[date] = None,
        exclude_schedule_id: Optional[str] = None,
    ) -> List[PickupLocationSchedule]:
        """
        Schedules of a location ordered by start date.

        ``from_date`` keeps only schedules still running on or after that date.
        """
        query = self._apply_eager_loading(self._build_query()).filter(
            PickupLocationSchedule.pickup_location_id == location_id
        )
        if from_date is not None:
            query = query.filter(PickupLocationSchedule.end_date >= from_date)
        if exclude_schedule_id is not None:
            query = query.filter(PickupLocationSchedule.id != exclude_schedule_id)
        return self._execute_query(
            query.order_by(PickupLocationSchedule.start_date, PickupLocationSchedule.id)
        )

    def create_schedule(
        self,
        location_id: str,
        name: str,
        start_date: date,
        end_date: date,
        days: Iterable[Dict[str, Any]],
    ) -> PickupLocationSchedule:
        schedule = self.create(
            pickup_location_id=location_id,
            name=name,
            start_date=start_date,
            end_date=end_date,
        )
        self.replace_days(schedule, days)
        return schedule

    def update_schedule(
        self,
        schedule: PickupLocationSchedule,
        name: str,
        start_date: date,
        end_date: date,
        days: Iterable[Dict[str, Any]],
    ) -> PickupLocationSchedule:
        schedule.name = name
        schedule.start_date = start_date
        schedule.end_date = end_date
        self.replace_days(schedule, days)
        return schedule

    def replace_days(
        self, schedule: PickupLocationSchedule, days: Iterable[Dict[str, Any]]
    ) -> None:
        """Swap the full weekday set of a schedule."""
        try:
            # Old rows must be gone before new ones hit the (schedule, weekday) unique key.
            schedule.days.clear()
            self.db.flush()
            schedule.days.extend(PickupLocationScheduleDay(**day) for day in days)
            self.db.flush()
        except SQLAlchemyError as e:
            self.logger.error(f"Error replacing days of schedule {schedule.id}: {str(e)}")
            raise RepositoryException(f"Failed to replace schedule days: {str(e)}")
