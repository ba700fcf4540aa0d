"""Base declarative class and shared column helpers for SQLAlchemy models."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TypeVar

from sqlalchemy import BigInteger, DateTime, Enum as SQLEnum, Integer, Numeric
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func

_ID_TYPE = BigInteger().with_variant(Integer, "sqlite")
MONEY = Numeric(15, 2)
# Wide enough for the largest money ratio: MAX_MONEY over a 0.01 cost basis.
PERCENT = Numeric(19, 2)

_E = TypeVar("_E", bound=Enum)


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""

    pass


def enum_type(enum_cls: type[_E], length: int = 20) -> SQLEnum:
    """Store a ``str`` enum by value in a portable VARCHAR column."""

    return SQLEnum(
        enum_cls,
        native_enum=False,
        length=length,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )


class CreatedAtMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )


class TimestampMixin(CreatedAtMixin):
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.current_timestamp(),
        onupdate=func.current_timestamp(),
    )


__all__ = ["Base", "CreatedAtMixin", "MONEY", "PERCENT", "TimestampMixin", "enum_type"]
