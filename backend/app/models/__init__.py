"""
Database models for the pickup scheduling core.

- Pickup locations with capacity limits
- Dated weekly schedules and their per-weekday opening hours
- Households and their food parcel appointments
"""

from .food_parcel import FoodParcel
from .household import Household
from .pickup_location import PickupLocation
from .schedule import PickupLocationSchedule, PickupLocationScheduleDay

__all__ = [
    "FoodParcel",
    "Household",
    "PickupLocation",
    "PickupLocationSchedule",
    "PickupLocationScheduleDay",
]
