# backend/app/repositories/pickup_location_repository.py
"""Data access for pickup locations, including row locks for capacity checks."""

import logging
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.pickup_location import PickupLocation
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class PickupLocationRepository(BaseRepository[PickupLocation]):
    def __init__(self, db: Session):
        super().__init__(db, PickupLocation)

    def get_for_update(self, location_id: str) -> Optional[PickupLocation]:
        """
        Load a location with a row lock held until the transaction ends.

        SQLite has no row locks; the clause is ignored there.
        """
        locked = self.lock_locations([location_id])
        return locked[0] if locked else None

    def lock_locations(self, location_ids: Iterable[str]) -> List[PickupLocation]:
        """Lock several locations in id order so concurrent writers cannot deadlock."""
        ids = sorted(set(location_ids))
        if not ids:
            return []
        query = (
            self.db.query(PickupLocation)
            .filter(PickupLocation.id.in_(ids))
            .order_by(PickupLocation.id)
            .with_for_update()
        )
        return self._execute_query(query)

    def list_all(self) -> List[PickupLocation]:
        return self._execute_query(self._build_query().order_by(PickupLocation.name))

    def set_outside_hours_count(self, location_id: str, count: int) -> None:
        try:
            self.db.query(PickupLocation).filter(PickupLocation.id == location_id).update(
                {PickupLocation.outside_hours_count: count}, synchronize_session="fetch"
            )
            self.db.flush()
        except SQLAlchemyError as e:
            self.logger.error(f"Error updating outside-hours count for {location_id}: {str(e)}")
            raise RepositoryException(f"Failed to update outside-hours count: {str(e)}")

    def total_outside_hours_count(self) -> int:
        query = self.db.query(func.coalesce(func.sum(PickupLocation.outside_hours_count), 0))
        return int(self._execute_scalar(query))
