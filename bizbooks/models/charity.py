"""Charity obligations accrued from income or entered manually."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from enum import Enum

from sqlalchemy import Date, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import _ID_TYPE, MONEY, Base, TimestampMixin, enum_type


class CharityStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


class Charity(TimestampMixin, Base):
    """An obligation to donate; rows with ``income_id`` were auto-generated."""

    __tablename__ = "charity"
    __table_args__ = (Index("idx_charity_user_status", "user_id", "status"),)

    id: Mapped[int] = mapped_column(_ID_TYPE, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        _ID_TYPE, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    income_id: Mapped[int | None] = mapped_column(
        _ID_TYPE, ForeignKey("income.id", ondelete="SET NULL")
    )
    amount_required: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    amount_paid: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0.00"))
    amount_remaining: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    status: Mapped[CharityStatus] = mapped_column(
        enum_type(CharityStatus), nullable=False, default=CharityStatus.PENDING
    )
    payment_date: Mapped[dt.date | None] = mapped_column(Date)
    description: Mapped[str | None] = mapped_column(Text)
    recipient: Mapped[str | None] = mapped_column(String(100))


__all__ = ["Charity", "CharityStatus"]
