# backend/app/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
"""

from . import food_parcels, households, pickup_locations

__all__ = ["food_parcels", "households", "pickup_locations"]
