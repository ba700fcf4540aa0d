"""Application middleware enforcing bearer-token authentication on the API."""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from bizbooks.core.errors import AuthenticationError
from bizbooks.core.log import get_logger, log_context
from bizbooks.core.security import AuthenticatedUser, SecurityProvider

LOGGER = get_logger(__name__)

PUBLIC_API_PATHS = frozenset({"/api/auth/register", "/api/auth/login"})


def _extract_bearer(header: str | None) -> str | None:
    if not header:
        return None
    parts = header.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


class AuthMiddleware(BaseHTTPMiddleware):
    """Reject API requests without a valid ``Authorization: Bearer`` token.

    Missing tokens yield 401, undecodable or expired tokens 403. Paths outside
    ``protected_prefix`` and the explicit public paths pass through untouched.
    """

    def __init__(
        self,
        app,
        security_provider: SecurityProvider,
        *,
        protected_prefix: str = "/api/",
        exempt_paths: Iterable[str] | None = None,
    ) -> None:
        super().__init__(app)
        self._security_provider = security_provider
        self._protected_prefix = protected_prefix
        self._exempt_paths = set(exempt_paths or ()) | PUBLIC_API_PATHS

    def _is_exempt(self, path: str) -> bool:
        """Return ``True`` when the request path should bypass authentication."""

        if path in self._exempt_paths:
            return True
        return not path.startswith(self._protected_prefix)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request.state.user = None
        path = request.url.path

        if request.method == "OPTIONS" or self._is_exempt(path):
            return await call_next(request)

        token = _extract_bearer(request.headers.get("authorization"))
        if token is None:
            return JSONResponse(
                {"success": False, "message": "Access token required"},
                status_code=401,
            )

        try:
            user: AuthenticatedUser = self._security_provider.decode_token(token)
        except AuthenticationError as exc:
            LOGGER.info("Rejected access token on %s: %s", path, exc)
            return JSONResponse(
                {"success": False, "message": "Invalid or expired token"},
                status_code=403,
            )

        request.state.user = user
        log_context.bind(user_id=user.user_id)
        return await call_next(request)


__all__ = ["AuthMiddleware", "PUBLIC_API_PATHS"]
