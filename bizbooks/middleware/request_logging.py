"""Per-request log context and access logging."""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from time import perf_counter
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from bizbooks.core.log import get_logger, log_context

LOGGER = get_logger("bizbooks.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind a request id to the log context and log one line per request."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("x-request-id") or uuid4().hex[:12]
        token = log_context.bind(request_id=request_id)
        started = perf_counter()
        try:
            response = await call_next(request)
        finally:
            log_context.reset(token)
        elapsed_ms = (perf_counter() - started) * 1000
        LOGGER.info(
            "%s %s -> %s (%.1f ms) request_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        response.headers["X-Request-ID"] = request_id
        return response


__all__ = ["RequestLoggingMiddleware"]
