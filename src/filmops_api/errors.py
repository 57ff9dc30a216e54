"""Error handling for the FastAPI application.

Every error leaves the API as ``{"success": false, "error": "<message>"}``.
"""

from typing import Any
from typing import Sequence
from typing import Union

import asyncpg
import pydantic
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException

from filmops_api.db.repository_team import AssignmentOverlapError
from filmops_api.db.repository_team import ExclusiveUsageConflictError
from filmops_api.db.repository_user import DuplicateEmailError
from filmops_api.monitoring.logger import log_response_info
from filmops_api.scheduling.overlap import InvalidDateRangeError

# Explicit exports
__all__ = [
    "BUSINESS_RULE_ERRORS",
    "error_body",
    "format_validation_errors",
    "handle_broad_exceptions",
    "handle_business_rule_errors",
    "handle_http_exception",
    "handle_integrity_errors",
    "handle_pydantic_validation_errors",
]

# Domain exceptions that surface as 400 with their own message
BUSINESS_RULE_ERRORS = (
    AssignmentOverlapError,
    ExclusiveUsageConflictError,
    DuplicateEmailError,
    InvalidDateRangeError,
)

VALUE_ERROR_PREFIX = "Value error, "


def error_body(message: str) -> dict:
    return {"success": False, "error": message}


def format_validation_errors(errors: Sequence[dict]) -> str:
    """
    Collapse pydantic errors into one message.

    Messages raised by our own validators are returned as written; anything else is
    prefixed with the offending field.
    """
    messages = []
    for error in errors:
        msg = str(error.get("msg", "Invalid value"))
        if msg.startswith(VALUE_ERROR_PREFIX):
            messages.append(msg[len(VALUE_ERROR_PREFIX) :])
            continue
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        messages.append(f"{'.'.join(location)}: {msg}" if location else msg)
    return "; ".join(messages) if messages else "Invalid request"


def _json_response(http_status: int, content: Any) -> JSONResponse:
    response = JSONResponse(status_code=http_status, content=content)
    log_response_info(response)
    return response


# fastapi docs on middlewares: https://fastapi.tiangolo.com/tutorial/middleware/
async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that goes unhandled by a more specific exception handler."""
    try:
        return await call_next(request)
    except Exception as err:  # pylint: disable=broad-except
        error_response = error_body("Internal server error")

        logger.error(
            f"Unhandled exception: {type(err).__name__}: {str(err)}",
            http_status=500,
            http_method=request.method,
            url_path=str(request.url.path),
            error_type=type(err).__name__,
            error_message=str(err),
            exc_info=True,  # Include full traceback
        )

        return _json_response(status.HTTP_500_INTERNAL_SERVER_ERROR, error_response)


# fastapi docs on error handlers: https://fastapi.tiangolo.com/tutorial/handling-errors/
async def handle_pydantic_validation_errors(
    request: Request, exc: Union[RequestValidationError, pydantic.ValidationError]
) -> JSONResponse:
    """Handle request and model validation errors as 400 Bad Request."""
    errors = exc.errors()
    error_response = error_body(format_validation_errors(errors))

    logger.warning(
        f"Validation error: {len(errors)} validation errors",
        http_status=400,
        http_method=request.method,
        url_path=str(request.url.path),
        error_type=type(exc).__name__,
        response_body=error_response,
    )

    return _json_response(status.HTTP_400_BAD_REQUEST, error_response)


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    """Render HTTPException (401/403/404/400 raised by routes and dependencies) in the common shape."""
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)

    if exc.status_code >= 500:
        logger.error(f"HTTP {exc.status_code}: {message}", http_status=exc.status_code, url_path=str(request.url.path))

    response = JSONResponse(status_code=exc.status_code, content=error_body(message), headers=exc.headers)
    log_response_info(response)
    return response


async def handle_business_rule_errors(request: Request, exc: Exception) -> JSONResponse:
    """Scheduling and uniqueness rules rejected the write."""
    logger.warning(
        f"Business rule rejected request: {exc}",
        http_status=400,
        http_method=request.method,
        url_path=str(request.url.path),
        error_type=type(exc).__name__,
    )
    return _json_response(status.HTTP_400_BAD_REQUEST, error_body(str(exc)))


async def handle_integrity_errors(request: Request, exc: asyncpg.IntegrityConstraintViolationError) -> JSONResponse:
    """
    Constraint violations raised by PostgreSQL.

    Foreign keys name a record that does not exist; unique and check constraints reject
    the values. Constraint details stay in the log.
    """
    if isinstance(exc, asyncpg.ForeignKeyViolationError):
        message = "Referenced record does not exist"
    elif isinstance(exc, asyncpg.UniqueViolationError):
        message = "A record with these values already exists"
    elif isinstance(exc, asyncpg.CheckViolationError):
        message = "Invalid value for this record"
    else:
        message = "Request violates a data constraint"

    logger.warning(
        f"Integrity error: {type(exc).__name__}",
        http_status=400,
        http_method=request.method,
        url_path=str(request.url.path),
        constraint=getattr(exc, "constraint_name", None),
        error_message=str(exc),
    )
    return _json_response(status.HTTP_400_BAD_REQUEST, error_body(message))
