# backend/app/repositories/factory.py
"""
Repository Factory

Central place where services obtain repository instances.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from .base_repository import BaseRepository

if TYPE_CHECKING:
    from ..models.household import Household
    from .food_parcel_repository import FoodParcelRepository
    from .pickup_location_repository import PickupLocationRepository
    from .schedule_repository import ScheduleRepository


class RepositoryFactory:
    """Factory class for creating repository instances."""

    @staticmethod
    def create_pickup_location_repository(db: Session) -> "PickupLocationRepository":
        from .pickup_location_repository import PickupLocationRepository

        return PickupLocationRepository(db)

    @staticmethod
    def create_schedule_repository(db: Session) -> "ScheduleRepository":
        from .schedule_repository import ScheduleRepository

        return ScheduleRepository(db)

    @staticmethod
    def create_food_parcel_repository(db: Session) -> "FoodParcelRepository":
        from .food_parcel_repository import FoodParcelRepository

        return FoodParcelRepository(db)

    @staticmethod
    def create_household_repository(db: Session) -> "BaseRepository[Household]":
        from ..models.household import Household

        return BaseRepository(db, Household)
