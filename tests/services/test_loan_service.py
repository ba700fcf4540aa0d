"""Tests for loans and repayments."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session

from bizbooks.core.errors import BusinessRuleError
from bizbooks.models import LoanStatus, LoanType, Transaction, TransactionType
from bizbooks.schemas.loans import LoanCreate, LoanListQuery, LoanPaymentCreate, LoanUpdate
from bizbooks.services import LoanService


@pytest.fixture()
def service(session: Session, user_id: int) -> LoanService:
    return LoanService(session, user_id)


def _loan(service: LoanService, principal: str = "500"):
    return service.create(
        LoanCreate(
            loan_type=LoanType.BUSINESS,
            lender_name="City Bank",
            principal_amount=Decimal(principal),
            interest_rate=Decimal("4.5"),
            start_date=dt.date(2024, 1, 1),
        )
    )


def _payment(amount: str) -> LoanPaymentCreate:
    return LoanPaymentCreate(payment_amount=Decimal(amount), payment_date=dt.date(2024, 2, 1))


def test_create_defaults_balance_to_principal(service: LoanService) -> None:
    loan = _loan(service)

    assert loan.current_balance == Decimal("500.00")
    assert loan.status is LoanStatus.ACTIVE


def test_payment_reduces_balance_and_pays_off(session: Session, service: LoanService) -> None:
    loan = _loan(service)

    first = service.record_payment(loan.id, _payment("200"))
    assert first.as_dict()["new_balance"] == Decimal("300.00")
    assert first.description == "Loan payment to City Bank"

    final = service.record_payment(loan.id, _payment("300"))
    assert final.loan.current_balance == Decimal("0.00")
    assert final.loan.status is LoanStatus.PAID

    with pytest.raises(BusinessRuleError, match="inactive loans"):
        service.record_payment(loan.id, _payment("1"))

    ledger = session.execute(
        select(Transaction.amount).where(
            Transaction.transaction_type == TransactionType.LOAN_PAYMENT
        )
    ).scalars().all()
    assert sorted(ledger) == [Decimal("200.00"), Decimal("300.00")]


def test_payment_cannot_exceed_balance(service: LoanService) -> None:
    loan = _loan(service, "100")

    with pytest.raises(BusinessRuleError, match="current balance of 100.00"):
        service.record_payment(loan.id, _payment("100.01"))


def test_list_totals_and_stats(service: LoanService) -> None:
    paid = _loan(service, "100")
    _loan(service, "400")
    service.update(paid.id, LoanUpdate(status=LoanStatus.PAID, current_balance=Decimal("0")))

    loans, totals = service.list_loans(LoanListQuery())
    assert len(loans) == 2
    assert totals == {
        "total_principal": Decimal("500.00"),
        "total_current_balance": Decimal("400.00"),
        "active_balance": Decimal("400.00"),
    }

    summary = service.stats()["summary"]
    assert summary["active_loans"] == 1
    assert summary["paid_loans"] == 1


def test_delete_removes_payment_rows(session: Session, service: LoanService) -> None:
    loan = _loan(service)
    service.record_payment(loan.id, _payment("50"))

    service.delete(loan.id)

    assert session.execute(select(Transaction)).first() is None
