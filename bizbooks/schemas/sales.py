"""Schemas for sale records."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Literal

from pydantic import Field, field_serializer, field_validator

from bizbooks.models import SaleStatus

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


class SaleCreate(RequestModel):
    purchase_id: int | None = Field(None, ge=1)
    amount: Amount
    selling_price: Amount
    description: Description | None = None
    category: CategoryName
    customer_name: str | None = Field(None, max_length=100)
    customer_contact: str | None = Field(None, max_length=50)
    payment_method: PaymentMethod = "Cash"
    date: dt.date
    status: SaleStatus = SaleStatus.COMPLETED
    notes: str | None = Field(None, max_length=1000)


class SaleUpdate(RequestModel):
    purchase_id: int | None = Field(None, ge=1)
    amount: Amount | None = None
    selling_price: Amount | None = None
    description: Description | None = None
    category: CategoryName | None = None
    customer_name: str | None = Field(None, max_length=100)
    customer_contact: str | None = Field(None, max_length=50)
    payment_method: PaymentMethod | None = None
    date: dt.date | None = None
    status: SaleStatus | None = None
    notes: str | None = Field(None, max_length=1000)

    @field_validator("amount", "selling_price", "category", "payment_method", "date", "status")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class SaleListQuery(DateRangeQuery):
    category: str | None = None
    status: SaleStatus | None = None
    sort_by: Literal["date", "amount", "selling_price", "profit", "created_at"] = "date"


class SaleRecord(Timestamped):
    id: int
    purchase_id: int | None = None
    amount: Decimal
    selling_price: Decimal
    profit: Decimal
    profit_percentage: Decimal | None = None
    description: str | None = None
    category: str
    customer_name: str | None = None
    customer_contact: str | None = None
    payment_method: str
    date: dt.date
    status: SaleStatus
    notes: str | None = None

    @field_serializer("amount", "selling_price", "profit", "profit_percentage")
    def serialize_money(self, value: Decimal | None) -> str | None:
        return money_str(value)


__all__ = ["SaleCreate", "SaleListQuery", "SaleRecord", "SaleUpdate"]
