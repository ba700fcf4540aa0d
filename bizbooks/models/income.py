"""Income records."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import _ID_TYPE, MONEY, Base, TimestampMixin


class Income(TimestampMixin, Base):
    """Money received; ``charity_required`` is derived from ``amount``."""

    __tablename__ = "income"
    __table_args__ = (Index("idx_income_user_date", "user_id", "date"),)

    id: Mapped[int] = mapped_column(_ID_TYPE, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        _ID_TYPE, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    category: Mapped[str] = mapped_column(String(50), nullable=False, default="General")
    source: Mapped[str | None] = mapped_column(String(100))
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    charity_required: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
