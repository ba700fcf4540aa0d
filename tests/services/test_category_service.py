"""Tests for user categories and their usage guards."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from bizbooks.core.errors import BusinessRuleError, ConflictError
from bizbooks.models import CategoryType
from bizbooks.schemas.categories import CategoryCreate, CategoryListQuery, CategoryUpdate
from bizbooks.schemas.income import IncomeCreate
from bizbooks.schemas.spending import SpendingCreate
from bizbooks.services import CategoryService, ExpenseService, IncomeService


def test_list_groups_seeded_categories_by_type(session: Session, user_id: int) -> None:
    categories, grouped = CategoryService(session, user_id).list_categories(CategoryListQuery())

    assert len(categories) == 25
    assert {kind: len(members) for kind, members in grouped.items()} == {
        "expense": 8,
        "income": 5,
        "purchase": 6,
        "sale": 6,
    }


def test_duplicate_name_and_type_conflicts(session: Session, user_id: int) -> None:
    service = CategoryService(session, user_id)

    with pytest.raises(ConflictError):
        service.create(CategoryCreate(name="Salary", type=CategoryType.INCOME))

    same_name_other_type = service.create(CategoryCreate(name="Salary", type=CategoryType.EXPENSE))
    assert same_name_other_type.color == "#3B82F6"

    with pytest.raises(ConflictError):
        service.update(same_name_other_type.id, CategoryUpdate(name="Healthcare"))


def test_delete_refuses_categories_in_use(session: Session, user_id: int) -> None:
    service = CategoryService(session, user_id)
    category = service.create(CategoryCreate(name="Rent", type=CategoryType.EXPENSE))
    ExpenseService(session, user_id).create(
        SpendingCreate(amount=Decimal("900"), category="Rent", date=dt.date(2024, 3, 1))
    )

    with pytest.raises(BusinessRuleError) as excinfo:
        service.delete(category.id)

    assert excinfo.value.data == {"income_count": 0, "expense_count": 1, "purchase_count": 0}
    assert service.get(category.id).name == "Rent"


def test_stats_and_usage_summary(session: Session, user_id: int) -> None:
    service = CategoryService(session, user_id)
    incomes = IncomeService(session, user_id)
    for day, amount in [(dt.date(2024, 1, 3), "100"), (dt.date(2024, 2, 3), "50")]:
        incomes.create(IncomeCreate(amount=Decimal(amount), category="Business", date=day))

    business = next(
        c for c in service.list_categories(CategoryListQuery(type=CategoryType.INCOME))[0]
        if c.name == "Business"
    )
    stats = service.stats(business.id, today=dt.date(2024, 6, 1))

    assert stats["usage_stats"]["transaction_count"] == 2
    assert stats["usage_stats"]["total_amount"] == Decimal("150.00")
    assert stats["usage_stats"]["max_amount"] == Decimal("100.00")
    assert [row["month_name"] for row in stats["monthly_breakdown"]] == ["January", "February"]

    summary = service.usage_summary()
    income_rows = [row for row in summary if row["type"] == "income"]
    assert income_rows[0]["name"] == "Business"
    assert income_rows[0]["total_amount"] == Decimal("150.00")
