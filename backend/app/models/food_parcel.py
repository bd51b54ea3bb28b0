# backend/app/models/food_parcel.py
"""
Food parcel model (a household's pickup appointment).

An appointment is identified by (household, location, earliest, latest).
The location is part of the key, so moving a household to another location
at the same time is a delete plus an insert rather than an update.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base
from .types import UTCDateTime

PARCEL_IDENTITY_COLUMNS = (
    "household_id",
    "pickup_location_id",
    "pickup_date_time_earliest",
    "pickup_date_time_latest",
)


class FoodParcel(Base):
    __tablename__ = "food_parcels"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    household_id = Column(
        String(26), ForeignKey("households.id", ondelete="CASCADE"), nullable=False
    )
    pickup_location_id = Column(String(26), ForeignKey("pickup_locations.id"), nullable=False)
    pickup_date_time_earliest = Column(UTCDateTime, nullable=False)
    pickup_date_time_latest = Column(UTCDateTime, nullable=False)
    is_picked_up = Column(Boolean, nullable=False, default=False)
    no_show_at = Column(UTCDateTime, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    household = relationship("Household", back_populates="parcels")
    location = relationship("PickupLocation", back_populates="parcels")

    __table_args__ = (
        UniqueConstraint(*PARCEL_IDENTITY_COLUMNS, name="uq_food_parcel_household_location_time"),
        CheckConstraint(
            "pickup_date_time_earliest < pickup_date_time_latest",
            name="check_parcel_time_window",
        ),
        Index(
            "ix_food_parcels_location_earliest",
            "pickup_location_id",
            "pickup_date_time_earliest",
        ),
        Index("ix_food_parcels_household", "household_id"),
    )

    @property
    def is_no_show(self) -> bool:
        return self.no_show_at is not None

    def __repr__(self) -> str:
        return (
            f"<FoodParcel {self.id} {self.pickup_location_id} "
            f"{self.pickup_date_time_earliest}..{self.pickup_date_time_latest}>"
        )
