# backend/app/repositories/food_parcel_repository.py
"""
Data access for food parcels.

Capacity counts and the conflict-tolerant bulk insert live here. Instants
passed in are compared as UTC; see ``UTCDateTime``.
"""

from datetime import datetime
import logging
from typing import Iterable, List, Sequence

from sqlalchemy import and_, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import RepositoryException
from ..core.ulid_helper import generate_ulid
from ..domain.parcel_operations import ParcelInsert
from ..models.food_parcel import PARCEL_IDENTITY_COLUMNS, FoodParcel
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class FoodParcelRepository(BaseRepository[FoodParcel]):
    def __init__(self, db: Session):
        super().__init__(db, FoodParcel)

    def _excluding(self, query: Query, exclude_ids: Sequence[str]) -> Query:
        if exclude_ids:
            query = query.filter(FoodParcel.id.notin_(list(exclude_ids)))
        return query

    def list_for_household(self, household_id: str) -> List[FoodParcel]:
        query = (
            self._build_query()
            .filter(FoodParcel.household_id == household_id)
            .order_by(FoodParcel.pickup_date_time_earliest)
        )
        return self._execute_query(query)

    def list_active_for_location(self, location_id: str, now: datetime) -> List[FoodParcel]:
        """Parcels at a location that are not picked up and start after ``now``."""
        query = (
            self._build_query()
            .filter(
                FoodParcel.pickup_location_id == location_id,
                FoodParcel.is_picked_up.is_(False),
                FoodParcel.pickup_date_time_earliest > now,
            )
            .order_by(FoodParcel.pickup_date_time_earliest)
        )
        return self._execute_query(query)

    def list_for_location_between(
        self, location_id: str, start: datetime, end: datetime
    ) -> List[FoodParcel]:
        query = (
            self._build_query()
            .filter(
                FoodParcel.pickup_location_id == location_id,
                FoodParcel.pickup_date_time_earliest >= start,
                FoodParcel.pickup_date_time_earliest <= end,
            )
            .order_by(FoodParcel.pickup_date_time_earliest)
        )
        return self._execute_query(query)

    def count_for_location_between(
        self,
        location_id: str,
        start: datetime,
        end: datetime,
        exclude_ids: Sequence[str] = (),
    ) -> int:
        query = self.db.query(func.count(FoodParcel.id)).filter(
            FoodParcel.pickup_location_id == location_id,
            FoodParcel.pickup_date_time_earliest >= start,
            FoodParcel.pickup_date_time_earliest <= end,
        )
        return int(self._execute_scalar(self._excluding(query, exclude_ids)))

    def count_overlapping(
        self,
        location_id: str,
        start: datetime,
        end: datetime,
        exclude_ids: Sequence[str] = (),
    ) -> int:
        """Parcels whose window overlaps [start, end)."""
        query = self.db.query(func.count(FoodParcel.id)).filter(
            FoodParcel.pickup_location_id == location_id,
            and_(
                FoodParcel.pickup_date_time_earliest < end,
                FoodParcel.pickup_date_time_latest > start,
            ),
        )
        return int(self._execute_scalar(self._excluding(query, exclude_ids)))

    def find_household_parcels_between(
        self,
        household_id: str,
        start: datetime,
        end: datetime,
        exclude_ids: Sequence[str] = (),
    ) -> List[FoodParcel]:
        query = self._build_query().filter(
            FoodParcel.household_id == household_id,
            FoodParcel.pickup_date_time_earliest >= start,
            FoodParcel.pickup_date_time_earliest <= end,
        )
        return self._execute_query(self._excluding(query, exclude_ids))

    def insert_parcels(self, household_id: str, inserts: Iterable[ParcelInsert]) -> List[str]:
        """
        Insert parcels, silently skipping rows whose identity key already exists.

        Returns the ids of rows actually inserted.
        """
        rows = [
            {
                "id": generate_ulid(),
                "household_id": household_id,
                "pickup_location_id": insert.location_id,
                "pickup_date_time_earliest": insert.earliest,
                "pickup_date_time_latest": insert.latest,
                "is_picked_up": False,
            }
            for insert in inserts
        ]
        if not rows:
            return []

        dialect_insert = _DIALECT_INSERTS.get(self.dialect_name)
        if dialect_insert is None:
            raise RepositoryException(
                f"Conflict-tolerant insert is not supported on {self.dialect_name}"
            )
        table = FoodParcel.__table__
        stmt = (
            dialect_insert(table)
            .values(rows)
            .on_conflict_do_nothing(index_elements=list(PARCEL_IDENTITY_COLUMNS))
            .returning(table.c.id)
        )
        try:
            return list(self.db.execute(stmt).scalars())
        except SQLAlchemyError as e:
            self.logger.error(f"Error inserting parcels for household {household_id}: {str(e)}")
            raise RepositoryException(f"Failed to insert parcels: {str(e)}")

    def delete_by_ids(self, parcel_ids: Sequence[str]) -> int:
        if not parcel_ids:
            return 0
        try:
            deleted = (
                self.db.query(FoodParcel)
                .filter(FoodParcel.id.in_(list(parcel_ids)))
                .delete(synchronize_session=False)
            )
            self.db.flush()
            return deleted
        except SQLAlchemyError as e:
            self.logger.error(f"Error deleting parcels {list(parcel_ids)}: {str(e)}")
            raise RepositoryException(f"Failed to delete parcels: {str(e)}")
