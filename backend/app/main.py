# backend/app/main.py
"""
FastAPI application for pickup scheduling.

All routes live under /api/v1; domain errors render as problem+json.
"""

import logging

from fastapi import APIRouter, FastAPI

from .core.config import settings
from .database import init_db
from .errors import register_error_handlers
from .routes.v1 import (
    food_parcels as food_parcels_v1,
    households as households_v1,
    pickup_locations as pickup_locations_v1,
)

# Configure logging
logging.basicConfig(
    level=settings.log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title="Pickup Scheduling API",
        description="Opening hours, time slots and parcel reconciliation for pickup locations",
        version="1.0.0",
    )

    api_v1 = APIRouter(prefix="/api/v1")
    api_v1.include_router(pickup_locations_v1.router, prefix="/pickup-locations")
    api_v1.include_router(households_v1.router, prefix="/households")
    api_v1.include_router(food_parcels_v1.router, prefix="/food-parcels")
    fastapi_app.include_router(api_v1)

    register_error_handlers(fastapi_app)

    if settings.is_sqlite and not settings.is_testing:
        # Local SQLite databases have no migrations; create missing tables.
        init_db()

    @fastapi_app.get("/health")
    def health_check() -> dict:
        return {"status": "healthy", "environment": settings.environment}

    logger.info(
        "Pickup Scheduling API ready (environment=%s, timezone=%s)",
        settings.environment,
        settings.pickup_timezone,
    )
    return fastapi_app


app = create_app()
