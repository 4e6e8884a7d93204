"""
Request Context Middleware.

Request id, timing and frontend identification for every request, bound
into structlog so submission logs can be traced back to the page post
that caused them.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from newsdesk.core.logging import get_logger

logger = get_logger(__name__)

# Should stay a subset of VALID_SOURCES in logging.py
KNOWN_FRONTENDS = {"web", "api", "cli", "internal"}


def resolve_frontend(request: Request, api_prefix: str) -> str:
    """
    Frontend that sent the request.

    An explicit X-Frontend-ID wins; otherwise JSON endpoints count as
    "api" and everything else (the pages and their form posts) as "web".
    """
    declared = request.headers.get("X-Frontend-ID", "").lower()
    if declared in KNOWN_FRONTENDS:
        return declared
    if request.url.path.startswith(api_prefix):
        return "api"
    return "web"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Adds request context to every request.

    Headers:
    - X-Request-ID: Unique request identifier (generated if not provided)
    - X-Frontend-ID: Frontend source identifier (web, api, cli, internal)
    - X-Response-Time: Response duration in milliseconds

    Access in endpoints:
        request.state.request_id
        request.state.frontend
    """

    def __init__(self, app, api_prefix: str = "/api/v1") -> None:
        super().__init__(app)
        self.api_prefix = api_prefix

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        frontend = resolve_frontend(request, self.api_prefix)

        request.state.request_id = request_id
        request.state.frontend = frontend

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            frontend=frontend,
            method=request.method,
            path=request.url.path,
        )

        started = time.perf_counter()
        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                logger.error(
                    "Request failed with exception",
                    extra={
                        "duration_ms": int((time.perf_counter() - started) * 1000),
                        "error_type": type(exc).__name__,
                    },
                )
                raise

            duration_ms = int((time.perf_counter() - started) * 1000)
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms}ms"

            if not request.url.path.startswith("/static"):
                logger.debug(
                    "Request completed",
                    extra={"status_code": response.status_code, "duration_ms": duration_ms},
                )
            return response
        finally:
            # Prevent context leaking into the next request on this task
            structlog.contextvars.clear_contextvars()
