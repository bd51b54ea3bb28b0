# backend/app/routes/v1/pickup_locations.py
"""
Pickup location routes - API v1

Endpoints:
    GET /{location_id}/availability - Is the location open on a date (and time)
    GET /{location_id}/time-slots - Slot grid for a date
    GET /{location_id}/time-slot-counts - Booked parcels per slot for a date
    POST /{location_id}/schedules/impact - Parcels stranded by a new or edited schedule
    GET /{location_id}/schedules/{schedule_id}/deletion-impact - Parcels stranded by a deletion
    POST /{location_id}/schedules - Create a schedule
    PUT /{location_id}/schedules/{schedule_id} - Replace a schedule
    DELETE /{location_id}/schedules/{schedule_id} - Delete a schedule
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies import (
    get_location_availability_service,
    get_schedule_impact_service,
    get_schedule_service,
)
from ...errors import raise_for_result
from ...schemas.results import (
    AvailabilityCheckResult,
    ScheduleImpactResult,
    ScheduleMutationResult,
    TimeSlotCountsResult,
    TimeSlotsResult,
)
from ...schemas.schedule import ScheduleInput
from ...services.location_availability_service import LocationAvailabilityService
from ...services.schedule_impact_service import ScheduleImpactService
from ...services.schedule_service import ScheduleService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pickup-locations-v1"])


@router.get("/{location_id}/availability", response_model=AvailabilityCheckResult)
def check_availability(
    location_id: str,
    date: str = Query(..., description="Local date, YYYY-MM-DD"),
    time: Optional[str] = Query(None, description="Local time, HH:mm"),
    service: LocationAvailabilityService = Depends(get_location_availability_service),
) -> AvailabilityCheckResult:
    result = service.check_location_availability(location_id, date, time)
    raise_for_result(result)
    return result


@router.get("/{location_id}/time-slots", response_model=TimeSlotsResult)
def get_time_slots(
    location_id: str,
    date: str = Query(..., description="Local date, YYYY-MM-DD"),
    service: LocationAvailabilityService = Depends(get_location_availability_service),
) -> TimeSlotsResult:
    result = service.get_available_time_slots(location_id, date)
    raise_for_result(result)
    return result


@router.get("/{location_id}/time-slot-counts", response_model=TimeSlotCountsResult)
def get_time_slot_counts(
    location_id: str,
    date: str = Query(..., description="Local date, YYYY-MM-DD"),
    service: LocationAvailabilityService = Depends(get_location_availability_service),
) -> TimeSlotCountsResult:
    result = service.get_timeslot_counts(location_id, date)
    raise_for_result(result)
    return result


@router.post("/{location_id}/schedules/impact", response_model=ScheduleImpactResult)
def check_schedule_change_impact(
    location_id: str,
    proposed: ScheduleInput,
    exclude_schedule_id: Optional[str] = Query(None),
    service: ScheduleImpactService = Depends(get_schedule_impact_service),
) -> ScheduleImpactResult:
    result = service.check_parcels_affected_by_schedule_change(
        location_id, proposed, exclude_schedule_id
    )
    raise_for_result(result)
    return result


@router.get(
    "/{location_id}/schedules/{schedule_id}/deletion-impact",
    response_model=ScheduleImpactResult,
)
def check_schedule_deletion_impact(
    location_id: str,
    schedule_id: str,
    service: ScheduleImpactService = Depends(get_schedule_impact_service),
) -> ScheduleImpactResult:
    result = service.check_parcels_affected_by_schedule_deletion(location_id, schedule_id)
    raise_for_result(result)
    return result


@router.post(
    "/{location_id}/schedules",
    response_model=ScheduleMutationResult,
    status_code=status.HTTP_201_CREATED,
)
def create_schedule(
    location_id: str,
    data: ScheduleInput,
    service: ScheduleService = Depends(get_schedule_service),
) -> ScheduleMutationResult:
    result = service.create_schedule(location_id, data)
    raise_for_result(result)
    return result


@router.put("/{location_id}/schedules/{schedule_id}", response_model=ScheduleMutationResult)
def update_schedule(
    location_id: str,
    schedule_id: str,
    data: ScheduleInput,
    service: ScheduleService = Depends(get_schedule_service),
) -> ScheduleMutationResult:
    result = service.update_schedule(location_id, schedule_id, data)
    raise_for_result(result)
    return result


@router.delete("/{location_id}/schedules/{schedule_id}", response_model=ScheduleMutationResult)
def delete_schedule(
    location_id: str,
    schedule_id: str,
    service: ScheduleService = Depends(get_schedule_service),
) -> ScheduleMutationResult:
    result = service.delete_schedule(location_id, schedule_id)
    raise_for_result(result)
    return result
