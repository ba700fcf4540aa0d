"""Schemas for charity obligations and payments."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any, Literal

from pydantic import Field, field_serializer

from bizbooks.models import CharityStatus

from .common import Amount, DateRangeQuery, Description, RequestModel, Timestamped, money_str


class CharityPaymentCreate(RequestModel):
    charity_id: int = Field(ge=1)
    payment_amount: Amount
    payment_date: dt.date
    recipient: str | None = Field(None, max_length=100)
    description: Description | None = None


class CharityCreate(RequestModel):
    amount_required: Amount
    description: str = Field(min_length=1, max_length=500)
    recipient: str | None = Field(None, max_length=100)


class CharityUpdate(RequestModel):
    description: Description | None = None
    recipient: str | None = Field(None, max_length=100)


class CharityListQuery(DateRangeQuery):
    status: CharityStatus | None = None
    sort_by: Literal["created_at", "amount_required", "amount_remaining"] = "created_at"


class CharityRecord(Timestamped):
    id: int
    income_id: int | None = None
    amount_required: Decimal
    amount_paid: Decimal
    amount_remaining: Decimal
    status: CharityStatus
    payment_date: dt.date | None = None
    description: str | None = None
    recipient: str | None = None
    income_amount: Decimal | None = None
    income_description: str | None = None
    income_date: dt.date | None = None

    @field_serializer("amount_required", "amount_paid", "amount_remaining", "income_amount")
    def serialize_money(self, value: Decimal | None) -> str | None:
        return money_str(value)

    @classmethod
    def from_row(
        cls,
        charity: Any,
        income_amount: Decimal | None = None,
        income_description: str | None = None,
        income_date: dt.date | None = None,
    ) -> CharityRecord:
        """Build a record from a charity row joined with its source income."""

        return cls.model_validate(charity).model_copy(
            update={
                "income_amount": income_amount,
                "income_description": income_description,
                "income_date": income_date,
            }
        )


__all__ = [
    "CharityCreate",
    "CharityListQuery",
    "CharityPaymentCreate",
    "CharityRecord",
    "CharityUpdate",
]
