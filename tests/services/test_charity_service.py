"""Tests for charity obligations and payments."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session

from bizbooks.core.errors import BusinessRuleError
from bizbooks.models import Charity, CharityStatus, Transaction, TransactionType
from bizbooks.schemas.charity import CharityCreate, CharityListQuery, CharityPaymentCreate
from bizbooks.schemas.income import IncomeCreate
from bizbooks.services import CharityService, IncomeService


@pytest.fixture()
def charity_id(session: Session, user_id: int) -> int:
    created = IncomeService(session, user_id).create(
        IncomeCreate(amount=Decimal("1000"), category="Sales Revenue", date=dt.date(2024, 5, 1))
    )
    return created.charity.id


def _pay(service: CharityService, charity_id: int, amount: str, **extra):
    return service.record_payment(
        CharityPaymentCreate(
            charity_id=charity_id,
            payment_amount=Decimal(amount),
            payment_date=dt.date(2024, 5, 15),
            **extra,
        )
    )


def test_partial_then_full_payment(session: Session, user_id: int, charity_id: int) -> None:
    service = CharityService(session, user_id)

    charity, income_amount, _, _ = _pay(service, charity_id, "20", recipient="Food Bank")
    assert charity.amount_paid == Decimal("20.00")
    assert charity.amount_remaining == Decimal("40.00")
    assert charity.status is CharityStatus.PARTIAL
    assert charity.recipient == "Food Bank"
    assert income_amount == Decimal("1000.00")

    charity = _pay(service, charity_id, "40")[0]
    assert charity.amount_remaining == Decimal("0.00")
    assert charity.status is CharityStatus.PAID
    assert charity.payment_date == dt.date(2024, 5, 15)

    payments = session.execute(
        select(Transaction).where(Transaction.transaction_type == TransactionType.CHARITY)
    ).scalars().all()
    assert sorted(row.amount for row in payments) == [Decimal("20.00"), Decimal("40.00")]
    assert payments[0].description == "Charity payment: Charity contribution"


def test_overpayment_is_rejected_and_rolled_back(
    session: Session, user_id: int, charity_id: int
) -> None:
    service = CharityService(session, user_id)

    with pytest.raises(BusinessRuleError, match="remaining balance of 60.00"):
        _pay(service, charity_id, "60.01")

    charity = session.get(Charity, charity_id, populate_existing=True)
    assert charity.amount_paid == Decimal("0.00")
    assert charity.status is CharityStatus.PENDING
    assert (
        session.execute(
            select(Transaction).where(Transaction.transaction_type == TransactionType.CHARITY)
        ).first()
        is None
    )


def test_auto_generated_charity_cannot_be_deleted(
    session: Session, user_id: int, charity_id: int
) -> None:
    with pytest.raises(BusinessRuleError, match="auto-generated"):
        CharityService(session, user_id).delete(charity_id)


def test_manual_charity_lifecycle(session: Session, user_id: int) -> None:
    service = CharityService(session, user_id)

    charity = service.create_manual(
        CharityCreate(amount_required=Decimal("25"), description="Zakat top-up")
    )
    assert charity.income_id is None
    assert charity.amount_remaining == Decimal("25.00")

    _pay(service, charity.id, "5")
    service.delete(charity.id)

    assert session.execute(select(Charity)).first() is None
    assert session.execute(select(Transaction)).first() is None


def test_list_filters_by_status(session: Session, user_id: int, charity_id: int) -> None:
    service = CharityService(session, user_id)
    service.create_manual(CharityCreate(amount_required=Decimal("10"), description="Manual"))
    _pay(service, charity_id, "10")

    rows, info = service.list_records(CharityListQuery(status=CharityStatus.PARTIAL))

    assert info.total_records == 1
    assert rows[0][0].id == charity_id


def test_stats_counts_statuses(session: Session, user_id: int, charity_id: int) -> None:
    service = CharityService(session, user_id)
    service.create_manual(CharityCreate(amount_required=Decimal("10"), description="Manual"))
    _pay(service, charity_id, "60")

    summary = service.stats(today=dt.date(2024, 6, 1))["summary"]

    assert summary["total_required"] == Decimal("70.00")
    assert summary["total_paid"] == Decimal("60.00")
    assert summary["paid_count"] == 1
    assert summary["pending_count"] == 1
