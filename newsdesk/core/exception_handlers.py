"""
Exception Handlers.

Turn exceptions escaping an endpoint into the ErrorResponse envelope.
Submission failures do not get here: the services report them as
SubmissionResult values. What does arrive is a request the server cannot
serve at all (tag list unavailable, malformed JSON body, bugs).

Usage:
    app = FastAPI()
    register_exception_handlers(app)
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from newsdesk.core.exceptions import (
    ApplicationError,
    ConfigurationError,
    ExternalServiceError,
    MissingCredentialsError,
    NotFoundError,
    ValidationError,
)
from newsdesk.core.logging import get_logger, log_with_source
from newsdesk.schemas.base import ErrorDetail, ErrorResponse, ResponseMetadata

logger = get_logger(__name__)

# Checked in order with isinstance, so subclasses precede their bases
EXCEPTION_STATUS_MAP: list[tuple[type[ApplicationError], int]] = [
    (MissingCredentialsError, 401),
    (ValidationError, 400),
    (NotFoundError, 404),
    (ExternalServiceError, 502),
    (ConfigurationError, 500),
]


def status_for(exc: ApplicationError) -> int:
    """HTTP status for an application error (500 when unmapped)."""
    return next(
        (status for exc_type, status in EXCEPTION_STATUS_MAP if isinstance(exc, exc_type)),
        500,
    )


def _error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None) or request.headers.get("x-request-id")
    body = ErrorResponse(
        error=ErrorDetail(code=code, message=message, details=details or None),
        metadata=ResponseMetadata(request_id=request_id),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    status_code = status_for(exc)
    log_with_source(
        logger,
        "api",
        "error" if status_code >= 500 else "warning",
        "Request failed",
        code=exc.code,
        error=exc.message,
        status=status_code,
    )
    details = exc.details if isinstance(exc, ValidationError) else None
    return _error_response(request, status_code, exc.code, exc.message, details)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON or form bodies: 422 listing every offending field."""
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "message": err.get("msg", "Validation error"),
            "type": err.get("type", "unknown"),
        }
        for err in exc.errors()
    ]
    log_with_source(logger, "api", "warning", "Request body rejected", error_count=len(errors))
    return _error_response(
        request,
        422,
        "VAL_REQUEST_INVALID",
        "Request validation failed",
        {"validation_errors": errors},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else: generic 500, traceback to the log only."""
    logger.exception("Unhandled exception", source="internal", exception_type=type(exc).__name__)
    return _error_response(request, 500, "SYS_INTERNAL_ERROR", "An unexpected error occurred")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
