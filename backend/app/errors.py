# backend/app/errors.py
"""
HTTP error rendering.

Failed operation results and domain exceptions become problem+json style
bodies carrying the machine-readable ``code`` and the ``errors`` list.
"""

from typing import Any, Dict, NoReturn, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.enums import ErrorCode
from .core.exceptions import DomainException
from .schemas.results import OperationResult

_STATUS_BY_CODE: Dict[str, int] = {
    ErrorCode.VALIDATION_ERROR.value: 400,
    ErrorCode.INVALID_DATE.value: 400,
    ErrorCode.INVALID_TIME.value: 400,
    ErrorCode.INVALID_TIME_WINDOW.value: 400,
    ErrorCode.INVALID_SCHEDULE.value: 400,
    ErrorCode.LOCATION_NOT_FOUND.value: 404,
    ErrorCode.SCHEDULE_NOT_FOUND.value: 404,
    ErrorCode.PARCEL_NOT_FOUND.value: 404,
    ErrorCode.HOUSEHOLD_NOT_FOUND.value: 404,
    ErrorCode.MAX_DAILY_CAPACITY_REACHED.value: 409,
    ErrorCode.MAX_SLOT_CAPACITY_REACHED.value: 409,
    ErrorCode.HOUSEHOLD_DOUBLE_BOOKING.value: 409,
    ErrorCode.NO_SCHEDULE.value: 422,
    ErrorCode.LOCATION_CLOSED.value: 422,
    ErrorCode.OUTSIDE_OPERATING_HOURS.value: 422,
    ErrorCode.PAST_TIME_SLOT.value: 422,
}


def _title_from_status(status_code: int) -> str:
    mapping = {
        400: "Bad Request",
        404: "Not Found",
        409: "Conflict",
        422: "Unprocessable Entity",
        500: "Internal Server Error",
    }
    return mapping.get(status_code, "Error")


def status_for_code(code: Optional[str]) -> int:
    return _STATUS_BY_CODE.get(code or "", 500)


def raise_for_result(result: OperationResult) -> None:
    """Raise an HTTPException for a failed result; do nothing on success."""
    if result.success:
        return
    first = result.errors[0] if result.errors else None
    raise HTTPException(
        status_code=status_for_code(first.code if first else None),
        detail={
            "message": first.message if first else "Operation failed",
            "code": first.code if first else ErrorCode.INTERNAL_ERROR.value,
            "errors": [error.model_dump() for error in result.errors],
        },
    )


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    raise exc.to_http_exception()


def _problem(
    *,
    status: int,
    title: Optional[str] = None,
    detail: Optional[str] = None,
    instance: Optional[str] = None,
    code: Optional[str] = None,
    errors: Optional[Any] = None,
) -> Dict[str, Any]:
    problem: Dict[str, Any] = {
        "type": "about:blank",
        "title": title or _title_from_status(status),
        "status": status,
        "detail": detail or "",
        "instance": instance or "",
    }
    if code:
        problem["code"] = code
    if errors is not None:
        problem["errors"] = errors
    return problem


def _parse_detail(detail: Any) -> tuple[Optional[str], Optional[str], Optional[Any]]:
    if isinstance(detail, dict):
        code = detail.get("code") if isinstance(detail.get("code"), str) else None
        message = detail.get("message") or detail.get("detail")
        detail_text = message if isinstance(message, str) else None
        errors = detail.get("errors") or detail.get("details")
        return detail_text, code, errors
    if isinstance(detail, str):
        return detail, None, None
    if detail is None:
        return None, None, None
    return str(detail), None, None


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        detail_text, code, errors = _parse_detail(exc.detail)
        problem = _problem(
            status=exc.status_code,
            detail=detail_text,
            instance=request.url.path,
            code=code,
            errors=jsonable_encoder(errors) if errors is not None else None,
        )
        return JSONResponse(
            problem,
            status_code=exc.status_code,
            media_type="application/problem+json",
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        status_code = exc.to_http_exception().status_code
        problem = _problem(
            status=status_code,
            detail=exc.message,
            instance=request.url.path,
            code=exc.code,
            errors=[jsonable_encoder(exc.to_error())],
        )
        return JSONResponse(problem, status_code=status_code, media_type="application/problem+json")

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ())[1:]) or None,
                "code": ErrorCode.VALIDATION_ERROR.value,
                "message": error.get("msg", "Invalid value"),
                "details": {"type": error.get("type")},
            }
            for error in exc.errors()
        ]
        problem = _problem(
            status=422,
            detail="Request validation failed",
            instance=request.url.path,
            code=ErrorCode.VALIDATION_ERROR.value,
            errors=errors,
        )
        return JSONResponse(problem, status_code=422, media_type="application/problem+json")
