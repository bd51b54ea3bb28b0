# backend/app/schemas/results.py
"""
Result objects returned by public service operations.

Every operation reports ``success`` plus a list of errors shaped as
``{field, code, message, details}``. Domain exceptions raised inside a
service are converted here at the operation boundary.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field, ValidationError

from ..core.enums import ErrorCode
from ..core.exceptions import DomainException, ValidationException
from ._strict_base import StrictModel


class ErrorDetail(StrictModel):
    field: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class OperationResult(StrictModel):
    success: bool = True
    errors: List[ErrorDetail] = Field(default_factory=list)

    @classmethod
    def failure(cls, *exceptions: DomainException, **fields: Any):
        return cls(
            success=False,
            errors=[ErrorDetail(**exc.to_error()) for exc in exceptions],
            **fields,
        )

    @property
    def first_error_code(self) -> Optional[str]:
        return self.errors[0].code if self.errors else None


class AvailabilityCheckResult(OperationResult):
    available: bool = False
    reason: Optional[str] = None
    message: str = ""
    opening_time: Optional[str] = None
    closing_time: Optional[str] = None


class TimeSlotsResult(OperationResult):
    date: Optional[str] = None
    slot_duration_minutes: int = 15
    slots: List[str] = Field(default_factory=list)


class TimeSlotCountsResult(OperationResult):
    date: Optional[str] = None
    counts: Dict[str, int] = Field(default_factory=dict)


class ScheduleImpactResult(OperationResult):
    affected_count: int = 0


class ScheduleMutationResult(OperationResult):
    schedule_id: Optional[str] = None
    affected_count: int = 0
    outside_hours_count: Optional[int] = None


class ReconciliationResult(OperationResult):
    inserted_ids: List[str] = Field(default_factory=list)
    deleted_ids: List[str] = Field(default_factory=list)
    unchanged_ids: List[str] = Field(default_factory=list)
    skipped_past_count: int = 0


class ParcelActionResult(OperationResult):
    parcel_id: Optional[str] = None


def exceptions_from_validation_error(
    exc: ValidationError, prefix: Optional[str] = None
) -> List[ValidationException]:
    """One ValidationException per pydantic error, keyed by dotted field path."""
    converted = []
    for error in exc.errors():
        path = ".".join(str(part) for part in error.get("loc", ()))
        if prefix:
            path = f"{prefix}.{path}" if path else prefix
        converted.append(
            ValidationException(
                message=str(error.get("msg", "Invalid value")),
                code=ErrorCode.VALIDATION_ERROR.value,
                details={"type": error.get("type")},
                field=path or None,
            )
        )
    return converted
