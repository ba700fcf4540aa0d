"""Tests for accounts and inter-account transfers."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from bizbooks.core.errors import BusinessRuleError, ConflictError, NotFoundError
from bizbooks.models import Account, AccountType, Transaction, TransactionType
from bizbooks.schemas.accounts import AccountCreate, AccountUpdate, TransferCreate
from bizbooks.services import AccountService, AuditTrail


def _open(service: AccountService, name: str, balance: str, kind=AccountType.BANK) -> Account:
    return service.create(
        AccountCreate(account_type=kind, account_name=name, balance=Decimal(balance))
    )


def _transfer(source: int, destination: int, amount: str) -> TransferCreate:
    return TransferCreate(
        from_account_id=source,
        to_account_id=destination,
        amount=Decimal(amount),
        date=dt.date(2024, 7, 1),
    )


def test_registration_seeds_cash_account(session: Session, user_id: int) -> None:
    accounts, totals = AccountService(session, user_id).list_accounts()

    assert [(a.account_name, a.account_type) for a in accounts] == [
        ("Cash in Hand", AccountType.CASH)
    ]
    assert totals == {"cash": Decimal("0.00"), "grand_total": Decimal("0.00")}


def test_transfer_moves_balance_and_writes_two_ledger_rows(
    session: Session, user_id: int
) -> None:
    service = AccountService(session, user_id)
    bank = _open(service, "Main Bank", "100")
    savings = _open(service, "Rainy Day", "0", AccountType.SAVINGS)

    transfer = service.transfer(_transfer(bank.id, savings.id, "40"))

    assert transfer.from_account.balance == Decimal("60.00")
    assert transfer.to_account.balance == Decimal("40.00")
    assert transfer.description == "Transfer from Main Bank to Rainy Day"
    rows = session.execute(
        select(Transaction)
        .where(Transaction.transaction_type == TransactionType.TRANSFER)
        .order_by(Transaction.id)
    ).scalars().all()
    assert [(row.amount, row.account_id) for row in rows] == [
        (Decimal("-40.00"), bank.id),
        (Decimal("40.00"), savings.id),
    ]
    assert rows[0].description.endswith("(Debit)")
    assert rows[1].description.endswith("(Credit)")


def test_transfer_rejects_insufficient_balance(session: Session, user_id: int) -> None:
    service = AccountService(session, user_id)
    bank = _open(service, "Main Bank", "10")
    savings = _open(service, "Rainy Day", "0", AccountType.SAVINGS)

    with pytest.raises(BusinessRuleError, match="Insufficient balance"):
        service.transfer(_transfer(bank.id, savings.id, "10.01"))

    assert session.get(Account, bank.id, populate_existing=True).balance == Decimal("10.00")
    assert session.execute(select(Transaction)).first() is None


def test_transfer_rejects_same_and_missing_accounts(session: Session, user_id: int) -> None:
    service = AccountService(session, user_id)
    bank = _open(service, "Main Bank", "10")

    with pytest.raises(BusinessRuleError, match="same account"):
        service.transfer(_transfer(bank.id, bank.id, "1"))
    with pytest.raises(NotFoundError, match="One or both accounts not found"):
        service.transfer(_transfer(bank.id, bank.id + 100, "1"))


def test_duplicate_names_conflict(session: Session, user_id: int) -> None:
    service = AccountService(session, user_id)
    bank = _open(service, "Main Bank", "0")

    with pytest.raises(ConflictError):
        _open(service, "Main Bank", "0")
    with pytest.raises(ConflictError):
        service.update(bank.id, AccountUpdate(account_name="Cash in Hand"))


def test_delete_requires_zero_balance(session: Session, user_id: int) -> None:
    service = AccountService(session, user_id)
    bank = _open(service, "Main Bank", "5")

    with pytest.raises(BusinessRuleError, match="non-zero balance"):
        service.delete(bank.id)

    service.update(bank.id, AccountUpdate(balance=Decimal("0")))
    service.delete(bank.id)
    with pytest.raises(NotFoundError):
        service.get(bank.id)


def test_failed_ledger_write_rolls_back_both_balances(
    session: Session, session_factory: sessionmaker, user_id: int
) -> None:
    service = AccountService(session, user_id)
    bank = _open(service, "Main Bank", "100")
    savings = _open(service, "Rainy Day", "10", AccountType.SAVINGS)
    record = AuditTrail.record

    def fail_on_credit(self, transaction_type, amount, *args, **kwargs):
        if amount > 0:
            raise RuntimeError("ledger down")
        return record(self, transaction_type, amount, *args, **kwargs)

    with patch.object(AuditTrail, "record", autospec=True, side_effect=fail_on_credit):
        with pytest.raises(RuntimeError):
            service.transfer(_transfer(bank.id, savings.id, "40"))

    with session_factory() as fresh:
        balances = dict(
            fresh.execute(
                select(Account.account_name, Account.balance).where(Account.user_id == user_id)
            ).all()
        )
        transfers = fresh.execute(
            select(Transaction).where(Transaction.transaction_type == TransactionType.TRANSFER)
        ).all()
    assert balances["Main Bank"] == Decimal("100.00")
    assert balances["Rainy Day"] == Decimal("10.00")
    assert transfers == []
