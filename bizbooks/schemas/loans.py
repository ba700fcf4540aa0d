"""Schemas for loans and loan payments."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field, field_serializer, field_validator

from bizbooks.models import LoanStatus, LoanType

from .common import Amount, Description, NonNegativeAmount, RequestModel, Timestamped, money_str

InterestRate = Annotated[Decimal, Field(ge=Decimal("0"), le=Decimal("100"))]


class LoanCreate(RequestModel):
    loan_type: LoanType
    lender_name: str = Field(min_length=1, max_length=100)
    principal_amount: Amount
    current_balance: NonNegativeAmount | None = None
    interest_rate: InterestRate | None = None
    monthly_payment: NonNegativeAmount | None = None
    start_date: dt.date
    due_date: dt.date | None = None


class LoanUpdate(RequestModel):
    lender_name: str | None = Field(None, min_length=1, max_length=100)
    current_balance: NonNegativeAmount | None = None
    interest_rate: InterestRate | None = None
    monthly_payment: NonNegativeAmount | None = None
    due_date: dt.date | None = None
    status: LoanStatus | None = None

    @field_validator("lender_name", "current_balance", "status")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class LoanPaymentCreate(RequestModel):
    payment_amount: Amount
    payment_date: dt.date
    description: Description | None = None


class LoanListQuery(BaseModel):
    status: LoanStatus | None = None
    loan_type: LoanType | None = None


class LoanRecord(Timestamped):
    id: int
    loan_type: LoanType
    lender_name: str
    principal_amount: Decimal
    current_balance: Decimal
    interest_rate: Decimal | None = None
    monthly_payment: Decimal | None = None
    start_date: dt.date
    due_date: dt.date | None = None
    status: LoanStatus

    @field_serializer("principal_amount", "current_balance", "interest_rate", "monthly_payment")
    def serialize_money(self, value: Decimal | None) -> str | None:
        return money_str(value)


__all__ = [
    "LoanCreate",
    "LoanListQuery",
    "LoanPaymentCreate",
    "LoanRecord",
    "LoanUpdate",
]
