"""Error Handlers — map exceptions to the back-office JSON error envelope.

Invariants:
    - BackOfficeError → its own status code and to_response() envelope
    - RateLimitedError additionally carries a Retry-After header (seconds)
    - RequestValidationError → 400 with one entry per offending field
    - Any other exception → 500 with a fixed message; internals never leak

Design Decisions:
    - Client errors (4xx) logged at WARNING, server errors at ERROR, so a
      burst of failed logins does not page anyone
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.errors import (
    BackOfficeError, ErrorCategory, ErrorSeverity, RateLimitedError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BackOfficeError, handle_backoffice_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


def _request_extra(request: Request, **extra) -> dict:
    return {"path": request.url.path, "method": request.method, **extra}


async def handle_backoffice_error(request: Request, exc: BackOfficeError):
    level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
    logger.log(
        level,
        f"{exc.code}: {exc.message}",
        extra=_request_extra(
            request, error_code=exc.code, status_code=exc.http_status,
        ),
    )
    headers = None
    if isinstance(exc, RateLimitedError):
        headers = {"Retry-After": str(exc.retry_after_seconds)}
    return JSONResponse(
        status_code=exc.http_status, content=exc.to_response(), headers=headers,
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.warning(
        f"Rejected request body: {len(details)} invalid field(s)",
        extra=_request_extra(request, error_code="VALIDATION_ERROR", status_code=400),
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.ERROR.value,
                "details": details,
            },
        },
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error(
        f"Unhandled {type(exc).__name__}: {exc}",
        exc_info=True,
        extra=_request_extra(request, error_code="INTERNAL_ERROR", status_code=500),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )
