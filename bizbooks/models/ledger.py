"""Audit ledger of bookkeeping events."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from enum import Enum

from sqlalchemy import Date, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import _ID_TYPE, MONEY, Base, CreatedAtMixin, enum_type


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    PURCHASE = "purchase"
    SALE = "sale"
    TRANSFER = "transfer"
    LOAN_PAYMENT = "loan_payment"
    CHARITY = "charity"


class Transaction(CreatedAtMixin, Base):
    """One ledger row per mutating event, pointing back at its source row."""

    __tablename__ = "transactions"
    __table_args__ = (
        Index("idx_transactions_user_date", "user_id", "date"),
        Index("idx_transactions_reference", "reference_table", "reference_id"),
    )

    id: Mapped[int] = mapped_column(_ID_TYPE, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        _ID_TYPE, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    transaction_type: Mapped[TransactionType] = mapped_column(
        enum_type(TransactionType), nullable=False
    )
    reference_id: Mapped[int | None] = mapped_column(_ID_TYPE)
    reference_table: Mapped[str | None] = mapped_column(String(50))
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    account_id: Mapped[int | None] = mapped_column(
        _ID_TYPE, ForeignKey("accounts.id", ondelete="SET NULL")
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)


__all__ = ["Transaction", "TransactionType"]
