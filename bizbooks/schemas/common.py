"""Shared pydantic building blocks for request and response payloads."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from bizbooks.domain.derived import round_money

MAX_MONEY = Decimal("9999999999999.99")
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

Amount = Annotated[Decimal, Field(ge=Decimal("0.01"), le=MAX_MONEY)]
NonNegativeAmount = Annotated[Decimal, Field(ge=Decimal("0"), le=MAX_MONEY)]
Description = Annotated[str, Field(max_length=500)]
CategoryName = Annotated[str, Field(min_length=1, max_length=50)]

PaymentMethod = Literal[
    "Cash",
    "Credit Card",
    "Debit Card",
    "Bank Transfer",
    "Check",
    "PayPal",
    "Mobile Payment",
    "Other",
]
SortOrder = Literal["asc", "desc"]


def money_str(value: Decimal | int | float | None) -> str | None:
    """Render a money value as a two-place decimal string."""

    if value is None:
        return None
    return str(round_money(value))


class RequestModel(BaseModel):
    """Base for inbound payloads: trims strings and ignores unknown keys."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    def provided_fields(self) -> dict[str, Any]:
        """Return only the fields the client actually sent."""

        return self.model_dump(exclude_unset=True)


class RecordModel(BaseModel):
    """Base for outbound rows read straight off ORM instances."""

    model_config = ConfigDict(from_attributes=True)


class Timestamped(RecordModel):
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DateRangeQuery(BaseModel):
    """Common list filters shared by dated ledgers."""

    page: int = Field(1, ge=1)
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    start_date: date | None = None
    end_date: date | None = None
    sort_order: SortOrder = "desc"


__all__ = [
    "Amount",
    "CategoryName",
    "DEFAULT_PAGE_SIZE",
    "DateRangeQuery",
    "Description",
    "MAX_MONEY",
    "MAX_PAGE_SIZE",
    "NonNegativeAmount",
    "PaymentMethod",
    "RecordModel",
    "RequestModel",
    "SortOrder",
    "Timestamped",
    "money_str",
]
