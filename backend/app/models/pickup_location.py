# backend/app/models/pickup_location.py
"""
Pickup location model.

A location owns its dated schedules and carries the capacity limits used
when appointments are booked. ``outside_hours_count`` is a cached counter
of active parcels that no longer fit the opening hours; it is recomputed
explicitly after every schedule or parcel change.
"""

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.config import settings
from ..core.ulid_helper import generate_ulid
from ..database import Base


class PickupLocation(Base):
    __tablename__ = "pickup_locations"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    name = Column(String(255), nullable=False)
    street_address = Column(String(255), nullable=False, default="")
    postal_code = Column(String(10), nullable=True)
    parcels_max_per_day = Column(Integer, nullable=True)
    parcels_max_per_slot = Column(Integer, nullable=True)
    default_slot_duration_minutes = Column(
        Integer, nullable=False, default=lambda: settings.default_slot_duration_minutes
    )
    outside_hours_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    schedules = relationship(
        "PickupLocationSchedule",
        back_populates="location",
        cascade="all, delete-orphan",
        order_by="PickupLocationSchedule.start_date",
    )
    parcels = relationship("FoodParcel", back_populates="location")

    __table_args__ = (
        CheckConstraint(
            "default_slot_duration_minutes > 0 AND default_slot_duration_minutes <= 240",
            name="check_slot_duration_range",
        ),
        CheckConstraint(
            "parcels_max_per_day IS NULL OR parcels_max_per_day > 0",
            name="check_max_per_day_positive",
        ),
        CheckConstraint(
            "parcels_max_per_slot IS NULL OR parcels_max_per_slot > 0",
            name="check_max_per_slot_positive",
        ),
    )

    def __repr__(self) -> str:
        return f"<PickupLocation {self.id} {self.name!r}>"
