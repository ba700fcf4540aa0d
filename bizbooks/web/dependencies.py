"""Shared FastAPI dependency definitions."""
from __future__ import annotations

from collections.abc import Generator

from fastapi import Request
from sqlalchemy.orm import Session, sessionmaker

from bizbooks.core.errors import InvalidRequestError


def get_session_factory(request: Request) -> sessionmaker:
    """Return the session factory created for the running application."""

    return request.app.state.session_factory


def get_db_session(request: Request) -> Generator[Session, None, None]:
    """Yield a database session suitable for request-scoped usage."""

    session = get_session_factory(request)()
    try:
        yield session
    finally:
        session.close()


def parse_record_id(value: str, entity: str) -> int:
    """Convert a path segment to a row id, rejecting anything but a positive integer."""

    if not value.isdigit() or int(value) < 1:
        raise InvalidRequestError(f"Invalid {entity} ID")
    return int(value)


__all__ = ["get_db_session", "get_session_factory", "parse_record_id"]
