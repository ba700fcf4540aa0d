"""Database helpers."""

from .engine import create_sync_engine
from .session import build_sessionmaker, get_sessionmaker
from .unit_of_work import UnitOfWork, transaction

__all__ = [
    "UnitOfWork",
    "build_sessionmaker",
    "create_sync_engine",
    "get_sessionmaker",
    "transaction",
]
