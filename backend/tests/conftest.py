# backend/tests/conftest.py
"""
Pytest configuration for the pickup scheduling tests.

Every test gets a fresh in-memory SQLite database and a fixed clock:
Tuesday 2025-06-10 14:00 in Stockholm (12:00 UTC).
"""

import os

# Set BEFORE any app imports so settings never point at a real database.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["IS_TESTING"] = "true"

from datetime import date, datetime, timedelta
from typing import Callable, Dict, Optional

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.dependencies import get_db, get_time_provider
from app.core.enums import Weekday
from app.core.time_provider import FixedTimeProvider
from app.database import Base
from app.main import app
from app.models import FoodParcel, Household, PickupLocation, PickupLocationSchedule
from app.models.schedule import PickupLocationScheduleDay
from tests.helpers.pickups import OpenHours, as_time

NOW = "2025-06-10T12:00:00Z"


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db(session_factory) -> Session:
    """A session per test; the database disappears with the engine."""
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def time_provider() -> FixedTimeProvider:
    return FixedTimeProvider(NOW)


@pytest.fixture
def location(db: Session) -> PickupLocation:
    pickup_location = PickupLocation(
        name="Centrum",
        street_address="Storgatan 1",
        postal_code="11122",
        default_slot_duration_minutes=15,
    )
    db.add(pickup_location)
    db.commit()
    return pickup_location


@pytest.fixture
def make_location(db: Session) -> Callable[..., PickupLocation]:
    def _make(name: str = "Annex", **fields) -> PickupLocation:
        pickup_location = PickupLocation(name=name, street_address="Sidogatan 2", **fields)
        db.add(pickup_location)
        db.commit()
        return pickup_location

    return _make


@pytest.fixture
def make_schedule(db: Session) -> Callable[..., PickupLocationSchedule]:
    def _make(
        pickup_location: PickupLocation,
        start: str,
        end: str,
        days: Dict[Weekday, OpenHours],
        name: Optional[str] = None,
    ) -> PickupLocationSchedule:
        schedule = PickupLocationSchedule(
            pickup_location_id=pickup_location.id,
            name=name or f"{start} to {end}",
            start_date=date.fromisoformat(start),
            end_date=date.fromisoformat(end),
            days=[
                PickupLocationScheduleDay(weekday=weekday, is_open=False)
                if hours is None
                else PickupLocationScheduleDay(
                    weekday=weekday,
                    is_open=True,
                    opening_time=as_time(hours[0]),
                    closing_time=as_time(hours[1]),
                )
                for weekday, hours in days.items()
            ],
        )
        db.add(schedule)
        db.commit()
        return schedule

    return _make


@pytest.fixture
def household(db: Session) -> Household:
    recipient = Household(first_name="Anna", last_name="Svensson")
    db.add(recipient)
    db.commit()
    return recipient


@pytest.fixture
def make_household(db: Session) -> Callable[..., Household]:
    def _make(first_name: str = "Erik", last_name: str = "Lind") -> Household:
        recipient = Household(first_name=first_name, last_name=last_name)
        db.add(recipient)
        db.commit()
        return recipient

    return _make


@pytest.fixture
def make_parcel(db: Session) -> Callable[..., FoodParcel]:
    def _make(
        recipient: Household,
        pickup_location: PickupLocation,
        earliest: datetime,
        minutes: int = 15,
        is_picked_up: bool = False,
    ) -> FoodParcel:
        parcel = FoodParcel(
            household_id=recipient.id,
            pickup_location_id=pickup_location.id,
            pickup_date_time_earliest=earliest,
            pickup_date_time_latest=earliest + timedelta(minutes=minutes),
            is_picked_up=is_picked_up,
        )
        db.add(parcel)
        db.commit()
        return parcel

    return _make


@pytest.fixture
def client(db: Session, time_provider: FixedTimeProvider):
    """Test client bound to the test session and the fixed clock."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_time_provider] = lambda: time_provider

    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()
