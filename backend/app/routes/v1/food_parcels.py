# backend/app/routes/v1/food_parcels.py
"""
Food parcel routes - API v1

Endpoints:
    PATCH /{parcel_id}/schedule - Move a parcel to another slot
    POST /{parcel_id}/pickup - Mark a parcel as picked up
    POST /{parcel_id}/no-show - Mark a parcel as not collected
"""

import logging

from fastapi import APIRouter, Depends

from ...api.dependencies import get_parcel_assignment_service
from ...errors import raise_for_result
from ...schemas.food_parcel import RescheduleRequest
from ...schemas.results import ParcelActionResult
from ...services.parcel_assignment_service import ParcelAssignmentService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["food-parcels-v1"])


@router.patch("/{parcel_id}/schedule", response_model=ParcelActionResult)
def reschedule_parcel(
    parcel_id: str,
    request: RescheduleRequest,
    service: ParcelAssignmentService = Depends(get_parcel_assignment_service),
) -> ParcelActionResult:
    result = service.update_food_parcel_schedule(parcel_id, request.start_time)
    raise_for_result(result)
    return result


@router.post("/{parcel_id}/pickup", response_model=ParcelActionResult)
def mark_picked_up(
    parcel_id: str,
    service: ParcelAssignmentService = Depends(get_parcel_assignment_service),
) -> ParcelActionResult:
    result = service.mark_picked_up(parcel_id)
    raise_for_result(result)
    return result


@router.post("/{parcel_id}/no-show", response_model=ParcelActionResult)
def mark_no_show(
    parcel_id: str,
    service: ParcelAssignmentService = Depends(get_parcel_assignment_service),
) -> ParcelActionResult:
    result = service.mark_no_show(parcel_id)
    raise_for_result(result)
    return result
