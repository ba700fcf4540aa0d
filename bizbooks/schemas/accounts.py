"""Schemas for cash and bank accounts."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import Field, field_serializer, field_validator

from bizbooks.models import AccountType

from .common import Amount, Description, NonNegativeAmount, RequestModel, Timestamped, money_str


class AccountCreate(RequestModel):
    account_type: AccountType
    account_name: str = Field(min_length=1, max_length=100)
    balance: NonNegativeAmount = Decimal("0")
    bank_name: str | None = Field(None, max_length=100)
    account_number: str | None = Field(None, max_length=50)


class AccountUpdate(RequestModel):
    account_name: str | None = Field(None, min_length=1, max_length=100)
    balance: NonNegativeAmount | None = None
    bank_name: str | None = Field(None, max_length=100)
    account_number: str | None = Field(None, max_length=50)

    @field_validator("account_name", "balance")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class TransferCreate(RequestModel):
    from_account_id: int = Field(ge=1)
    to_account_id: int = Field(ge=1)
    amount: Amount
    description: Description | None = None
    date: dt.date


class AccountRecord(Timestamped):
    id: int
    account_type: AccountType
    account_name: str
    balance: Decimal
    bank_name: str | None = None
    account_number: str | None = None

    @field_serializer("balance")
    def serialize_balance(self, value: Decimal) -> str | None:
        return money_str(value)


__all__ = ["AccountCreate", "AccountRecord", "AccountUpdate", "TransferCreate"]
