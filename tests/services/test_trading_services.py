"""Tests for expenses, purchases and sales."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session

from bizbooks.core.errors import NotFoundError
from bizbooks.models import Sale, SaleStatus, Transaction, TransactionType
from bizbooks.schemas.common import MAX_MONEY
from bizbooks.schemas.sales import SaleCreate, SaleUpdate
from bizbooks.schemas.spending import SpendingCreate, SpendingListQuery, SpendingUpdate
from bizbooks.services import ExpenseService, PurchaseService, SaleService


def _spend(service, amount: str, category: str = "Inventory", **extra):
    return service.create(
        SpendingCreate(
            amount=Decimal(amount),
            category=category,
            date=extra.pop("date", dt.date(2024, 4, 1)),
            **extra,
        )
    )


def _ledger(session: Session, table: str) -> list[Transaction]:
    return session.execute(
        select(Transaction).where(Transaction.reference_table == table).order_by(Transaction.id)
    ).scalars().all()


def test_expense_update_revises_its_ledger_row(session: Session, user_id: int) -> None:
    service = ExpenseService(session, user_id)
    expense = _spend(service, "75", "Bills & Utilities", description="Power bill")

    service.update(expense.id, SpendingUpdate(amount=Decimal("80.5"), description="Power"))

    (entry,) = _ledger(session, "expenses")
    session.refresh(entry)
    assert entry.transaction_type is TransactionType.EXPENSE
    assert entry.amount == Decimal("80.50")
    assert entry.description == "Expense: Power"

    service.delete(expense.id)
    assert _ledger(session, "expenses") == []


def test_expense_and_purchase_tables_are_separate(session: Session, user_id: int) -> None:
    expenses = ExpenseService(session, user_id)
    purchases = PurchaseService(session, user_id)
    purchase = _spend(purchases, "40")

    with pytest.raises(NotFoundError, match="Expense record not found"):
        expenses.get(purchase.id)
    assert _ledger(session, "purchases")[0].description == "Purchase: Inventory"


def test_spending_list_filters_payment_method(session: Session, user_id: int) -> None:
    service = PurchaseService(session, user_id)
    _spend(service, "10", payment_method="Cash")
    _spend(service, "20", payment_method="Bank Transfer")

    records, info = service.list_records(SpendingListQuery(payment_method="Bank Transfer"))

    assert info.total_records == 1
    assert records[0].amount == Decimal("20.00")


def test_spending_stats_groups_by_payment_method(session: Session, user_id: int) -> None:
    service = ExpenseService(session, user_id)
    _spend(service, "10", "Shopping", payment_method="Cash")
    _spend(service, "15", "Shopping", payment_method="Cash")
    _spend(service, "30", "Healthcare", payment_method="Debit Card")

    stats = service.stats(today=dt.date(2024, 12, 1))

    assert stats["summary"]["total_expenses"] == Decimal("55.00")
    assert stats["monthly"][0]["monthly_expenses"] == Decimal("55.00")
    by_method = {row["payment_method"]: row["count"] for row in stats["by_payment_method"]}
    assert by_method == {"Cash": 2, "Debit Card": 1}


def test_sale_derives_profit_and_links_purchase(session: Session, user_id: int) -> None:
    purchase = _spend(PurchaseService(session, user_id), "50")
    service = SaleService(session, user_id)
    assert [p.id for p in service.available_purchases()] == [purchase.id]

    sale = service.create(
        SaleCreate(
            purchase_id=purchase.id,
            amount=Decimal("50"),
            selling_price=Decimal("80"),
            category="Retail",
            date=dt.date(2024, 4, 2),
        )
    )

    assert sale.profit == Decimal("30.00")
    assert sale.profit_percentage == Decimal("60.00")
    assert service.available_purchases() == []
    (entry,) = _ledger(session, "sales")
    assert (entry.transaction_type, entry.amount) == (TransactionType.SALE, Decimal("80.00"))

    sale = service.update(sale.id, SaleUpdate(selling_price=Decimal("40")))
    assert sale.profit == Decimal("-10.00")
    assert sale.profit_percentage == Decimal("-20.00")


@pytest.mark.parametrize(
    ("cost", "price", "expected"),
    [
        ("1", "1001", "100000.00"),
        ("0.01", str(MAX_MONEY), "99999999999999800.00"),
    ],
)
def test_sale_profit_percentage_fits_its_column(
    session: Session, user_id: int, cost: str, price: str, expected: str
) -> None:
    sale = SaleService(session, user_id).create(
        SaleCreate(
            amount=Decimal(cost),
            selling_price=Decimal(price),
            category="Retail",
            date=dt.date(2024, 4, 2),
        )
    )

    assert sale.profit_percentage == Decimal(expected)
    column_type = Sale.__table__.c.profit_percentage.type
    integer_digits = len(str(abs(sale.profit_percentage.to_integral_value())))
    assert column_type.scale == 2
    assert integer_digits <= column_type.precision - column_type.scale


def test_sale_rejects_foreign_purchase(session: Session, user_id: int) -> None:
    with pytest.raises(NotFoundError, match="Purchase not found"):
        SaleService(session, user_id).create(
            SaleCreate(
                purchase_id=999,
                amount=Decimal("1"),
                selling_price=Decimal("2"),
                category="Retail",
                date=dt.date(2024, 4, 2),
            )
        )


def test_sale_stats_count_completed_only(session: Session, user_id: int) -> None:
    service = SaleService(session, user_id)
    for status in (SaleStatus.COMPLETED, SaleStatus.PENDING):
        service.create(
            SaleCreate(
                amount=Decimal("10"),
                selling_price=Decimal("25"),
                category="Retail",
                date=dt.date(2024, 4, 2),
                status=status,
            )
        )

    summary = service.stats()["summary"]

    assert summary["total_sales"] == 1
    assert summary["total_profit"] == Decimal("15.00")
