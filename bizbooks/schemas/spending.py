"""Schemas shared by expense and purchase records."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Literal

from pydantic import Field, field_serializer, field_validator

from .common import (
    Amount,
    CategoryName,
    DateRangeQuery,
    Description,
    PaymentMethod,
    RequestModel,
    Timestamped,
    money_str,
)


class SpendingCreate(RequestModel):
    amount: Amount
    description: Description | None = None
    category: CategoryName
    payment_method: PaymentMethod = "Cash"
    date: dt.date
    receipt_path: str | None = Field(None, max_length=255)


class SpendingUpdate(RequestModel):
    amount: Amount | None = None
    description: Description | None = None
    category: CategoryName | None = None
    payment_method: PaymentMethod | None = None
    date: dt.date | None = None
    receipt_path: str | None = Field(None, max_length=255)

    @field_validator("amount", "category", "payment_method", "date")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class SpendingListQuery(DateRangeQuery):
    category: str | None = None
    payment_method: PaymentMethod | None = None
    sort_by: Literal["date", "amount", "created_at"] = "date"


class SpendingRecordOut(Timestamped):
    id: int
    amount: Decimal
    description: str | None = None
    category: str
    payment_method: str
    date: dt.date
    receipt_path: str | None = None

    @field_serializer("amount")
    def serialize_amount(self, value: Decimal) -> str | None:
        return money_str(value)


__all__ = ["SpendingCreate", "SpendingListQuery", "SpendingRecordOut", "SpendingUpdate"]
