# backend/app/models/schedule.py
"""
Dated weekly schedules for pickup locations.

A schedule applies to an inclusive range of local calendar dates and has at
most one day row per weekday. Schedules of the same location may overlap;
availability treats them as a union.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    String,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.enums import Weekday
from ..core.ulid_helper import generate_ulid
from ..database import Base
from .base_enum import create_safe_enum


class PickupLocationSchedule(Base):
    __tablename__ = "pickup_location_schedules"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    pickup_location_id = Column(
        String(26), ForeignKey("pickup_locations.id", ondelete="CASCADE"), nullable=False
    )
    name = Column(String(255), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    location = relationship("PickupLocation", back_populates="schedules")
    days = relationship(
        "PickupLocationScheduleDay",
        back_populates="schedule",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("start_date <= end_date", name="check_schedule_date_range"),
        Index("ix_schedules_location_end_date", "pickup_location_id", "end_date"),
    )

    def __repr__(self) -> str:
        return f"<PickupLocationSchedule {self.id} {self.start_date}..{self.end_date}>"


class PickupLocationScheduleDay(Base):
    __tablename__ = "pickup_location_schedule_days"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    schedule_id = Column(
        String(26),
        ForeignKey("pickup_location_schedules.id", ondelete="CASCADE"),
        nullable=False,
    )
    weekday = Column(create_safe_enum(Weekday, "weekday_enum"), nullable=False)
    is_open = Column(Boolean, nullable=False, default=True)
    opening_time = Column(Time, nullable=True)
    closing_time = Column(Time, nullable=True)

    schedule = relationship("PickupLocationSchedule", back_populates="days")

    __table_args__ = (
        UniqueConstraint("schedule_id", "weekday", name="uq_schedule_day_weekday"),
        CheckConstraint(
            "NOT is_open OR (opening_time IS NOT NULL AND closing_time IS NOT NULL "
            "AND opening_time < closing_time)",
            name="check_open_day_hours",
        ),
    )
