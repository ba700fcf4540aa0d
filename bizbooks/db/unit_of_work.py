"""Transactional unit of work shared by every mutating service call.

A unit of work owns exactly one session (and therefore one pooled
connection) for the lifetime of a bookkeeping event. The primary row, any
derived rows and the audit ledger entries are written through that session
and committed together; any exception rolls the whole event back.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session, sessionmaker

from bizbooks.core.errors import BookkeepingError
from bizbooks.core.log import get_logger

LOGGER = get_logger(__name__)


def _log_rollback(exc: BaseException) -> None:
    if isinstance(exc, BookkeepingError):
        LOGGER.info("Rolled back unit of work: %s", exc.message)
    else:
        LOGGER.warning("Rolled back unit of work after %s", type(exc).__name__)


class UnitOfWork:
    """Context manager wrapping a fresh session in a single database transaction."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("UnitOfWork is not active")
        return self._session

    def __enter__(self) -> Session:
        self._session = self._session_factory()
        self._session.begin()
        return self._session

    def __exit__(self, exc_type, exc, tb) -> bool:
        session = self.session
        try:
            if exc_type is None:
                session.commit()
            else:
                session.rollback()
                _log_rollback(exc)
        finally:
            session.close()
            self._session = None
        return False


@contextmanager
def transaction(session: Session) -> Iterator[Session]:
    """Run a block inside the transaction of an already-open ``session``.

    Services receive request-scoped sessions; this helper gives them the same
    commit-or-rollback semantics as :class:`UnitOfWork` without opening a new
    connection.
    """

    if session.in_transaction():
        # autobegin may already have started one for a preceding read
        try:
            yield session
        except Exception as exc:
            session.rollback()
            _log_rollback(exc)
            raise
        session.commit()
        return

    try:
        with session.begin():
            yield session
    except Exception as exc:
        _log_rollback(exc)
        raise


__all__ = ["UnitOfWork", "transaction"]
