# backend/app/repositories/__init__.py
"""
Repository layer: all database queries for the scheduling core.

Services obtain repositories through RepositoryFactory and manage the
transactions; repositories only flush.
"""

from .base_repository import BaseRepository
from .factory import RepositoryFactory
from .food_parcel_repository import FoodParcelRepository
from .pickup_location_repository import PickupLocationRepository
from .schedule_repository import ScheduleRepository

__all__ = [
    "BaseRepository",
    "FoodParcelRepository",
    "PickupLocationRepository",
    "RepositoryFactory",
    "ScheduleRepository",
]
