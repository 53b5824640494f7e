"""
Error rendering.

Every exception that escapes a router ends up here and leaves as an
ErrorResponse envelope. ApplicationError subclasses carry their own status
and code; request validation is 422; anything else is an opaque 500 whose
text only reaches the log.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from jotter.backend.core.exceptions import (
    ApplicationError,
    ShareTokenExhaustedError,
    ValidationError,
)
from jotter.backend.core.logging import get_logger
from jotter.backend.schemas.base import ErrorDetail, ErrorResponse, ResponseMetadata

logger = get_logger(__name__)

REQUEST_INVALID = "VAL_REQUEST_INVALID"


def _get_request_id(request: Request) -> str | None:
    """Middleware-assigned ID, else whatever the client sent."""
    request_id = getattr(request.state, "request_id", None)
    if request_id is not None:
        return request_id
    return request.headers.get("x-request-id")


def _request_context(request: Request) -> dict[str, Any]:
    return {
        "method": request.method,
        "path": request.url.path,
        "request_id": _get_request_id(request),
    }


def _respond(request: Request, status_code: int, error: ErrorDetail) -> JSONResponse:
    envelope = ErrorResponse(
        error=error,
        metadata=ResponseMetadata(request_id=_get_request_id(request)),
    )
    return JSONResponse(status_code=status_code, content=envelope.model_dump(mode="json"))


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    extra = {
        "code": exc.code,
        "message": exc.message,
        "status": exc.status_code,
        **_request_context(request),
    }
    log = logger.error if exc.status_code >= 500 else logger.warning
    log("Request failed", extra=extra)

    details = exc.details if isinstance(exc, ValidationError) else None
    return _respond(
        request,
        exc.status_code,
        ErrorDetail(code=exc.code, message=exc.message, details=details or None),
    )


async def share_token_exhausted_handler(
    request: Request,
    exc: ShareTokenExhaustedError,
) -> JSONResponse:
    """
    Share token allocation gave up.

    Logged with share_token_event="exhausted" so it can be alerted on apart
    from other 500s. The attempt count stays in the log.
    """
    logger.error(
        "Share token allocation exhausted",
        extra={"share_token_event": "exhausted", "attempts": exc.attempts, **_request_context(request)},
    )
    return _respond(request, exc.status_code, ErrorDetail(code=exc.code, message=exc.message))


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    return [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", "Validation error"),
            "type": error.get("type", "unknown"),
        }
        for error in exc.errors()
    ]


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    field_errors = _field_errors(exc)
    logger.warning(
        "Invalid request",
        extra={"fields": [e["field"] for e in field_errors], **_request_context(request)},
    )
    return _respond(
        request,
        422,
        ErrorDetail(
            code=REQUEST_INVALID,
            message="Request validation failed",
            details={"validation_errors": field_errors},
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled exception",
        extra={"exception_type": type(exc).__name__, **_request_context(request)},
    )
    return _respond(
        request,
        ApplicationError.status_code,
        ErrorDetail(code=ApplicationError.code, message=ApplicationError.default_message),
    )


def register_exception_handlers(app: FastAPI) -> None:
    # Handlers are looked up along the exception's MRO, most specific first
    app.add_exception_handler(ShareTokenExhaustedError, share_token_exhausted_handler)
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
