"""Logging context middleware for observability.

Binds tenant_id, call_id, and request_id to structlog contextvars
for the duration of each request.
"""

from collections.abc import Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from structlog.contextvars import bind_contextvars, clear_contextvars

from switchyard.observability.logging import get_logger

logger = get_logger(__name__)


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Middleware that binds request context to structlog contextvars.

    Headers:
        X-Tenant-ID: Tenant identifier
        X-Call-ID: Call identifier, when a report is requested for a live call
        X-Request-ID: Request identifier (generated when absent)
    """

    async def dispatch(  # type: ignore[override]
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        """Process request and bind logging context."""
        clear_contextvars()

        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        bind_contextvars(
            tenant_id=request.headers.get("X-Tenant-ID"),
            call_id=request.headers.get("X-Call-ID"),
            request_id=request_id,
        )

        logger.info(
            "request_started",
            method=request.method,
            path=request.url.path,
        )

        response = await call_next(request)  # type: ignore[misc]
        response.headers["X-Request-ID"] = request_id

        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
        )

        return response  # type: ignore[no-any-return]
