"""Expense and purchase records.

Both tables share one column layout; they stay separate because an expense is
non-resale spend while a purchase is inventory that may later be sold.
"""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import _ID_TYPE, MONEY, Base, TimestampMixin


class SpendingRecord(TimestampMixin, Base):
    __abstract__ = True

    id: Mapped[int] = mapped_column(_ID_TYPE, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        _ID_TYPE, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(50), nullable=False, default="Cash")
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    receipt_path: Mapped[str | None] = mapped_column(String(255))


class Expense(SpendingRecord):
    __tablename__ = "expenses"
    __table_args__ = (Index("idx_expenses_user_date", "user_id", "date"),)


class Purchase(SpendingRecord):
    __tablename__ = "purchases"
    __table_args__ = (Index("idx_purchases_user_date", "user_id", "date"),)


__all__ = ["Expense", "Purchase", "SpendingRecord"]
