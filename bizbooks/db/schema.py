"""Schema bootstrap helpers."""
from __future__ import annotations

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from bizbooks.core.log import get_logger
from bizbooks.models import Base

LOGGER = get_logger(__name__)


def init_database(engine: Engine, *, drop_existing: bool = False) -> list[str]:
    """Create every mapped table on ``engine`` and return the table names."""

    if drop_existing:
        LOGGER.warning("Dropping all tables on %s", engine.url.render_as_string(hide_password=True))
        Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    tables = sorted(inspect(engine).get_table_names())
    LOGGER.info("Database schema ready (%d tables)", len(tables))
    return tables


__all__ = ["init_database"]
