# backend/app/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

Every service gets the request's database session and the clock source.
Tests override ``get_db`` and ``get_time_provider``.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...core.time_provider import SystemTimeProvider, TimeProvider
from ...services.location_availability_service import LocationAvailabilityService
from ...services.parcel_assignment_service import ParcelAssignmentService
from ...services.parcel_reconciliation_service import ParcelReconciliationService
from ...services.schedule_impact_service import ScheduleImpactService
from ...services.schedule_service import ScheduleService
from .database import get_db


def get_time_provider() -> TimeProvider:
    return SystemTimeProvider()


def get_location_availability_service(
    db: Session = Depends(get_db),
    time_provider: TimeProvider = Depends(get_time_provider),
) -> LocationAvailabilityService:
    return LocationAvailabilityService(db, time_provider)


def get_schedule_impact_service(
    db: Session = Depends(get_db),
    time_provider: TimeProvider = Depends(get_time_provider),
) -> ScheduleImpactService:
    return ScheduleImpactService(db, time_provider)


def get_schedule_service(
    db: Session = Depends(get_db),
    time_provider: TimeProvider = Depends(get_time_provider),
) -> ScheduleService:
    return ScheduleService(db, time_provider)


def get_parcel_reconciliation_service(
    db: Session = Depends(get_db),
    time_provider: TimeProvider = Depends(get_time_provider),
) -> ParcelReconciliationService:
    return ParcelReconciliationService(db, time_provider)


def get_parcel_assignment_service(
    db: Session = Depends(get_db),
    time_provider: TimeProvider = Depends(get_time_provider),
) -> ParcelAssignmentService:
    return ParcelAssignmentService(db, time_provider)
