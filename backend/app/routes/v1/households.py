# backend/app/routes/v1/households.py
"""
Household routes - API v1

Endpoints:
    PUT /{household_id}/parcels - Replace the household's future pickup windows
"""

import logging
from typing import List

from fastapi import APIRouter, Body, Depends

from ...api.dependencies import get_parcel_reconciliation_service
from ...errors import raise_for_result
from ...schemas.food_parcel import DesiredParcelsInput
from ...schemas.results import ReconciliationResult
from ...services.parcel_reconciliation_service import ParcelReconciliationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["households-v1"])


@router.put("/{household_id}/parcels", response_model=ReconciliationResult)
def update_household_parcels(
    household_id: str,
    parcels: List[DesiredParcelsInput] = Body(...),
    service: ParcelReconciliationService = Depends(get_parcel_reconciliation_service),
) -> ReconciliationResult:
    result = service.update_household_parcels(household_id, parcels)
    raise_for_result(result)
    return result
