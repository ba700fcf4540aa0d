"""Schemas for income records."""
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
    RequestModel,
    Timestamped,
    money_str,
)


class IncomeCreate(RequestModel):
    amount: Amount
    description: Description | None = None
    category: CategoryName = "General"
    source: str | None = Field(None, max_length=100)
    date: dt.date


class IncomeUpdate(RequestModel):
    amount: Amount | None = None
    description: Description | None = None
    category: CategoryName | None = None
    source: str | None = Field(None, max_length=100)
    date: dt.date | None = None

    @field_validator("amount", "category", "date")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class IncomeListQuery(DateRangeQuery):
    category: str | None = None
    sort_by: Literal["date", "amount", "created_at"] = "date"


class IncomeRecord(Timestamped):
    id: int
    amount: Decimal
    description: str | None = None
    category: str
    source: str | None = None
    date: dt.date
    charity_required: Decimal

    @field_serializer("amount", "charity_required")
    def serialize_money(self, value: Decimal) -> str | None:
        return money_str(value)


__all__ = ["IncomeCreate", "IncomeListQuery", "IncomeRecord", "IncomeUpdate"]
