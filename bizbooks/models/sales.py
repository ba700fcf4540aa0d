"""Sale records with derived profit columns."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from enum import Enum

from sqlalchemy import Date, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import _ID_TYPE, MONEY, PERCENT, Base, TimestampMixin, enum_type


class SaleStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Sale(TimestampMixin, Base):
    """A sale; ``amount`` is the cost basis, ``selling_price`` the revenue."""

    __tablename__ = "sales"
    __table_args__ = (Index("idx_sales_user_date", "user_id", "date"),)

    id: Mapped[int] = mapped_column(_ID_TYPE, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        _ID_TYPE, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    purchase_id: Mapped[int | None] = mapped_column(
        _ID_TYPE, ForeignKey("purchases.id", ondelete="SET NULL")
    )
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    selling_price: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    profit: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    profit_percentage: Mapped[Decimal | None] = mapped_column(PERCENT)
    description: Mapped[str | None] = mapped_column(Text)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    customer_name: Mapped[str | None] = mapped_column(String(100))
    customer_contact: Mapped[str | None] = mapped_column(String(50))
    payment_method: Mapped[str] = mapped_column(String(50), nullable=False, default="Cash")
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    status: Mapped[SaleStatus] = mapped_column(
        enum_type(SaleStatus), nullable=False, default=SaleStatus.COMPLETED
    )
    notes: Mapped[str | None] = mapped_column(Text)


__all__ = ["Sale", "SaleStatus"]
