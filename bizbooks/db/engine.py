"""Database engine factories."""
from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url

from bizbooks.core.config import get_settings
from bizbooks.core.log import get_logger

LOGGER = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # noqa: ARG001
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_sync_engine(url: str | None = None, **kwargs) -> Engine:
    """Create a synchronous SQLAlchemy engine using configured defaults.

    Server databases get a bounded ``QueuePool`` sized from ``DB_POOL_SIZE``.
    SQLite engines get foreign key enforcement switched on for every
    connection so ``ON DELETE`` rules behave the same as on MySQL.
    """

    settings = get_settings()
    resolved_url = url or settings.database.sqlalchemy_url
    is_sqlite = make_url(resolved_url).get_backend_name() == "sqlite"

    options = dict(kwargs)
    options.setdefault("echo", settings.sqlalchemy_echo)
    if not is_sqlite:
        options.setdefault("pool_size", settings.database.pool_size)
        options.setdefault("max_overflow", 0)
        options.setdefault("pool_pre_ping", True)

    LOGGER.debug(
        "Creating SQLAlchemy engine",
        extra={"url": settings.database.masked_url if url is None else "<explicit>", "options": options},
    )
    engine = create_engine(resolved_url, **options)
    if is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


__all__ = ["create_sync_engine"]
