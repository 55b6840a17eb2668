"""Error Handlers: turn exceptions that escape a route into JSON responses.

Invariants:
    - DashboardError -> its own http_status and to_response() body; the log
      record carries the invoice_id and action from the error context
    - Client errors (4xx) log at WARNING, server errors (5xx) at ERROR
    - RequestValidationError -> 400 with messages grouped per field, the same
      shape the form actions use for their field errors
    - Anything else -> 500 without internal details
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from dashboard.core.domain_types import FieldErrors
from dashboard.core.errors import DashboardError, ErrorSeverity

logger = logging.getLogger(__name__)

# request parts FastAPI prefixes onto every error location
_LOCATION_SOURCES = ("path", "query", "body", "header", "cookie")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DashboardError, _dashboard_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)


async def _dashboard_error_handler(request: Request, exc: DashboardError):
    logger.log(
        logging.ERROR if exc.http_status >= 500 else logging.WARNING,
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "invoice_id": exc.context.invoice_id,
            "action": exc.context.action,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    fields = group_request_errors(exc.errors())
    logger.warning(
        f"Rejected request to {request.url.path}: {sorted(fields)}",
        extra={"path": request.url.path, "error_code": "VALIDATION_ERROR"},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "category": "validation",
                "severity": ErrorSeverity.ERROR.value,
                "fields": fields,
            },
        },
    )


async def _unhandled_error_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc}",
        extra={"path": request.url.path, "error_code": "INTERNAL_ERROR"},
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": "internal",
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )


def group_request_errors(errors) -> FieldErrors:
    """Group pydantic error messages by field name, dropping the request part."""
    grouped: FieldErrors = {}
    for error in errors:
        loc = [str(part) for part in error["loc"]]
        if len(loc) > 1 and loc[0] in _LOCATION_SOURCES:
            loc = loc[1:]
        grouped.setdefault(".".join(loc), []).append(error["msg"])
    return grouped
