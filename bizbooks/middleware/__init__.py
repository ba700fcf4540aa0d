"""Starlette middleware used by the API."""

from .auth import AuthMiddleware
from .request_logging import RequestLoggingMiddleware

__all__ = ["AuthMiddleware", "RequestLoggingMiddleware"]
