"""Opinionated SQLAlchemy session helpers."""
from __future__ import annotations

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from .engine import create_sync_engine


def build_sessionmaker(engine: Engine) -> sessionmaker:
    """Return a ``sessionmaker`` bound to ``engine`` with the project defaults."""

    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_sessionmaker(url: str | None = None, **kwargs) -> sessionmaker:
    """Return a ``sessionmaker`` bound to a freshly created engine."""

    return build_sessionmaker(create_sync_engine(url, **kwargs))


__all__ = ["build_sessionmaker", "get_sessionmaker"]
