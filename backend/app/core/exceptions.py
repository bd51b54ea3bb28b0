# backend/app/core/exceptions.py
"""
Domain-specific exceptions for the pickup scheduling core.

Services raise these internally; public operations convert them into
result objects and the HTTP layer converts them into HTTPExceptions.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

from .enums import AvailabilityReason, ErrorCode

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        self.field = field
        super().__init__(self.message)

    def to_error(self) -> Dict[str, Any]:
        """Render as a single ``{field, code, message, details}`` error entry."""
        return {
            "field": self.field,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when input validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
    ) -> None:
        super().__init__(message, code or ErrorCode.VALIDATION_ERROR.value, details, field)


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = HTTP_422_UNPROCESSABLE


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details if self.details else {},
            },
        )


# Specific business exceptions


class LocationNotFoundException(NotFoundException):
    def __init__(self, location_id: str, field: Optional[str] = "location_id"):
        super().__init__(
            message=f"Pickup location {location_id} not found",
            code=ErrorCode.LOCATION_NOT_FOUND.value,
            details={"location_id": location_id},
            field=field,
        )


class AvailabilityException(BusinessRuleException):
    """Raised when a requested date or time is not within opening hours."""

    def __init__(
        self,
        message: str,
        reason: AvailabilityReason | ErrorCode,
        *,
        details: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
    ):
        super().__init__(message=message, code=reason.value, details=details, field=field)


class CapacityException(ConflictException):
    """Raised when a location or slot is already fully booked."""

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        *,
        details: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
    ):
        super().__init__(message=message, code=code.value, details=details, field=field)


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    Used when data access operations fail, such as connection issues,
    query failures, or constraint violations.
    """
