"""Cash and bank accounts."""
from __future__ import annotations

from decimal import Decimal
from enum import Enum

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import _ID_TYPE, MONEY, Base, TimestampMixin, enum_type


class AccountType(str, Enum):
    """Enumeration of supported account types."""

    CASH = "cash"
    BANK = "bank"
    SAVINGS = "savings"
    INVESTMENT = "investment"


class Account(TimestampMixin, Base):
    __tablename__ = "accounts"
    __table_args__ = (
        UniqueConstraint("user_id", "account_name", name="uq_accounts_user_name"),
        Index("idx_accounts_user_type", "user_id", "account_type"),
    )

    id: Mapped[int] = mapped_column(_ID_TYPE, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        _ID_TYPE, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    account_type: Mapped[AccountType] = mapped_column(enum_type(AccountType), nullable=False)
    account_name: Mapped[str] = mapped_column(String(100), nullable=False)
    balance: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0.00"))
    bank_name: Mapped[str | None] = mapped_column(String(100))
    account_number: Mapped[str | None] = mapped_column(String(50))


__all__ = ["Account", "AccountType"]
