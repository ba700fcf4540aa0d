"""Exception taxonomy shared by services and routers.

Services raise these errors from inside a unit of work; the unit of work rolls
back and re-raises, and the handlers registered in :func:`bizbooks.main.create_app`
turn them into the JSON envelope.
"""
from __future__ import annotations

from typing import Any


class BookkeepingError(Exception):
    """Base class for errors that map onto a client-facing response."""

    status_code: int = 400

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        data: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.data = data


class InvalidRequestError(BookkeepingError):
    """Malformed input detected outside the request schema (e.g. bad path id)."""

    status_code = 400


class NotFoundError(BookkeepingError):
    """Referenced row does not exist or is not owned by the caller."""

    status_code = 404


class BusinessRuleError(BookkeepingError):
    """A bookkeeping rule rejected the mutation (insufficient balance, etc.)."""

    status_code = 400


class ConflictError(BookkeepingError):
    """Uniqueness violation such as a duplicate account or category name."""

    status_code = 409


class InvalidCredentialsError(BookkeepingError):
    """Login attempted with an unknown user or a wrong password."""

    status_code = 401


class AuthenticationError(Exception):
    """Raised when authentication or token validation fails."""


__all__ = [
    "AuthenticationError",
    "BookkeepingError",
    "BusinessRuleError",
    "ConflictError",
    "InvalidCredentialsError",
    "InvalidRequestError",
    "NotFoundError",
]
