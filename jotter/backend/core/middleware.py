"""
Request Context Middleware.

Gives every request an ID, a source and a timer, and binds them into the
structlog context so every log line emitted while serving it carries them.
"""

import re
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from jotter.backend.core.logging import VALID_SOURCES, get_logger
from jotter.backend.core.utils import elapsed_ms, utc_now

logger = get_logger(__name__)

# Sources a client may claim through X-Frontend-ID
REQUEST_SOURCES = VALID_SOURCES - {"agent", "unknown"}

# Client supplied IDs are echoed into logs and headers, so keep them tame
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,128}$")


def resolve_request_id(header_value: str | None) -> str:
    if header_value and _REQUEST_ID_PATTERN.match(header_value):
        return header_value
    return str(uuid.uuid4())


def resolve_source(header_value: str | None) -> str:
    source = (header_value or "").lower()
    return source if source in REQUEST_SOURCES else "unknown"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Request headers:
        X-Request-ID    reused when well formed, otherwise a UUID is generated
        X-Frontend-ID   web, cli, api or internal; anything else is "unknown"

    Response headers:
        X-Request-ID, X-Response-Time

    request.state gets request_id, source and start_time.
    """

    def __init__(self, app: ASGIApp, log_requests: bool = True) -> None:
        super().__init__(app)
        self.log_requests = log_requests

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = resolve_request_id(request.headers.get("X-Request-ID"))
        source = resolve_source(request.headers.get("X-Frontend-ID"))
        start_time = utc_now()

        request.state.request_id = request_id
        request.state.source = source
        request.state.start_time = start_time

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            source=source,
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Request failed with exception",
                extra={
                    "duration_ms": elapsed_ms(start_time),
                    "error_type": type(exc).__name__,
                },
            )
            raise
        finally:
            structlog.contextvars.clear_contextvars()

        duration_ms = elapsed_ms(start_time)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms}ms"

        if self.log_requests:
            logger.info(
                "Request completed",
                extra={
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                    "request_id": request_id,
                    "source": source,
                },
            )

        return response
