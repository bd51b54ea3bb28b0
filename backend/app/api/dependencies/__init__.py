# backend/app/api/dependencies/__init__.py
"""
Central export point for all dependencies.
"""

from .database import get_db
from .services import (
    get_location_availability_service,
    get_parcel_assignment_service,
    get_parcel_reconciliation_service,
    get_schedule_impact_service,
    get_schedule_service,
    get_time_provider,
)

__all__ = [
    # Database
    "get_db",
    # Clock
    "get_time_provider",
    # Services
    "get_location_availability_service",
    "get_parcel_assignment_service",
    "get_parcel_reconciliation_service",
    "get_schedule_impact_service",
    "get_schedule_service",
]
