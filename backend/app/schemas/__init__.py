# backend/app/schemas/__init__.py
"""Pydantic schemas: request inputs and operation results."""

from .food_parcel import DesiredParcelsInput, RescheduleRequest, TimeWindowInput
from .results import (
    AvailabilityCheckResult,
    ErrorDetail,
    OperationResult,
    ParcelActionResult,
    ReconciliationResult,
    ScheduleImpactResult,
    ScheduleMutationResult,
    TimeSlotCountsResult,
    TimeSlotsResult,
)
from .schedule import ScheduleDayInput, ScheduleInput

__all__ = [
    "AvailabilityCheckResult",
    "DesiredParcelsInput",
    "ErrorDetail",
    "OperationResult",
    "ParcelActionResult",
    "ReconciliationResult",
    "RescheduleRequest",
    "ScheduleDayInput",
    "ScheduleImpactResult",
    "ScheduleInput",
    "ScheduleMutationResult",
    "TimeSlotCountsResult",
    "TimeSlotsResult",
    "TimeWindowInput",
]
