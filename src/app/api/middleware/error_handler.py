"""Global error handling.

Every error leaves the API in the same JSON envelope:
``error_code, message, user_message, suggestion, retry_allowed`` and, for
validation failures, ``errors: [{field, message}]``.
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from app.config import settings
from app.core.errors import get_error
from app.core.exceptions import ExpenseTrackerError, Unauthorized, ValidationError

logger = logging.getLogger(__name__)


def _envelope(error_code: str, **extra: Any) -> dict[str, Any]:
    error_info = get_error(error_code)
    return {
        "error_code": error_code,
        "message": error_info["message"],
        "user_message": error_info["user_message"],
        "suggestion": error_info["suggestion"],
        "retry_allowed": error_info["retry_allowed"],
        **extra,
    }


def _request_extra(request: Request, **extra: Any) -> dict[str, Any]:
    return {"path": request.url.path, "method": request.method, **extra}


async def handle_expense_tracker_error(
    request: Request, exc: ExpenseTrackerError
) -> JSONResponse:
    """Handle the application's typed exceptions.

    Args:
        request: The incoming request
        exc: The raised application exception

    Returns:
        JSONResponse with error details from the catalog
    """
    extra = _request_extra(request, error_code=exc.error_code)
    if settings.debug:
        extra["details"] = exc.details

    level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
    logger.log(level, f"Request rejected: {exc.error_code}", extra=extra)

    content = _envelope(exc.error_code)
    if isinstance(exc, ValidationError):
        content["errors"] = exc.errors

    headers = None
    if isinstance(exc, Unauthorized) and exc.http_status == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(status_code=exc.http_status, content=content, headers=headers)


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request body/query validation errors raised by FastAPI.

    Rendered exactly like a service-level ValidationError.
    """
    validation_error = ValidationError.from_pydantic(exc.errors())

    extra = _request_extra(request)
    if settings.debug:
        extra["errors"] = validation_error.errors
    logger.warning(f"Validation error on {request.url.path}", extra=extra)

    return await handle_expense_tracker_error(request, validation_error)


async def handle_integrity_error(
    request: Request, exc: IntegrityError
) -> JSONResponse:
    """Handle database integrity errors."""
    # Do not log str(exc): it can include SQL + bound parameters.
    if settings.debug:
        logger.exception(
            f"Database integrity error on {request.url.path}", extra=_request_extra(request)
        )
    else:
        logger.error(
            f"Database integrity error on {request.url.path}", extra=_request_extra(request)
        )

    error_msg = str(exc).lower()
    if "unique" in error_msg or "duplicate" in error_msg:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=_envelope("DB_002"))

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=_envelope("DB_001")
    )


async def handle_generic_error(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without exposing internals."""
    extra = _request_extra(request, error_type=type(exc).__name__)
    if settings.debug:
        logger.exception(f"Unexpected error on {request.url.path}", extra=extra)
    else:
        logger.error(f"Unexpected error on {request.url.path}", extra=extra)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=_envelope("SYS_001")
    )
