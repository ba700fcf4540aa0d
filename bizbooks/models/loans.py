"""Loans owed by the business."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from enum import Enum

from sqlalchemy import Date, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import _ID_TYPE, MONEY, Base, TimestampMixin, enum_type


class LoanType(str, Enum):
    PERSONAL = "personal"
    BUSINESS = "business"
    MORTGAGE = "mortgage"
    AUTO = "auto"
    OTHER = "other"


class LoanStatus(str, Enum):
    ACTIVE = "active"
    PAID = "paid"
    DEFAULTED = "defaulted"


class Loan(TimestampMixin, Base):
    """A loan; ``principal_amount`` never changes after creation."""

    __tablename__ = "loans"

    id: Mapped[int] = mapped_column(_ID_TYPE, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        _ID_TYPE, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    loan_type: Mapped[LoanType] = mapped_column(enum_type(LoanType), nullable=False)
    lender_name: Mapped[str] = mapped_column(String(100), nullable=False)
    principal_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    current_balance: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    interest_rate: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    monthly_payment: Mapped[Decimal | None] = mapped_column(MONEY)
    start_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    due_date: Mapped[dt.date | None] = mapped_column(Date)
    status: Mapped[LoanStatus] = mapped_column(
        enum_type(LoanStatus), nullable=False, default=LoanStatus.ACTIVE
    )


__all__ = ["Loan", "LoanStatus", "LoanType"]
