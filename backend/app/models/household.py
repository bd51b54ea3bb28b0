# backend/app/models/household.py
"""Household model (the recipient of food parcels)."""

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class Household(Base):
    __tablename__ = "households"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    parcels = relationship("FoodParcel", back_populates="household")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
