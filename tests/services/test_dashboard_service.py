"""Tests for the dashboard summary, analytics and metrics reports."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from bizbooks.schemas.charity import CharityPaymentCreate
from bizbooks.schemas.dashboard import AnalyticsQuery
from bizbooks.schemas.income import IncomeCreate
from bizbooks.schemas.spending import SpendingCreate
from bizbooks.services import CharityService, DashboardService, ExpenseService, IncomeService

TODAY = dt.date(2024, 6, 15)


@pytest.fixture()
def service(session: Session, user_id: int) -> DashboardService:
    incomes = IncomeService(session, user_id)
    expenses = ExpenseService(session, user_id)
    created = incomes.create(
        IncomeCreate(amount=Decimal("1000"), category="Business", date=dt.date(2024, 6, 1))
    )
    incomes.create(IncomeCreate(amount=Decimal("500"), category="Salary", date=dt.date(2024, 5, 10)))
    expenses.create(
        SpendingCreate(amount=Decimal("300"), category="Shopping", date=dt.date(2024, 6, 2))
    )
    expenses.create(
        SpendingCreate(amount=Decimal("100"), category="Healthcare", date=dt.date(2024, 5, 3))
    )
    CharityService(session, user_id).record_payment(
        CharityPaymentCreate(
            charity_id=created.charity.id,
            payment_amount=Decimal("60"),
            payment_date=dt.date(2024, 6, 10),
        )
    )
    return DashboardService(session, user_id)


def test_summary(service: DashboardService) -> None:
    report = service.summary(today=TODAY)

    summary = report["summary"]
    assert summary["total_income"] == Decimal("1500.00")
    assert summary["total_expenses"] == Decimal("400.00")
    assert summary["net_worth"] == Decimal("1100.00")
    assert summary["total_charity_required"] == Decimal("90.00")
    assert summary["total_charity_paid"] == Decimal("60.00")

    june = report["monthly_data"][5]
    assert len(report["monthly_data"]) == 12
    assert (june["month_name"], june["monthly_income"], june["monthly_charity"]) == (
        "Jun",
        Decimal("1000.00"),
        Decimal("60.00"),
    )
    assert june["monthly_profit"] == Decimal("700.00")

    assert [row["category"] for row in report["top_expense_categories"]] == [
        "Shopping",
        "Healthcare",
    ]
    assert report["top_expense_categories"][0]["percentage"] == Decimal("75.00")

    trend = report["trend_data"]
    assert [row["month"] for row in trend] == [
        "2024-01", "2024-02", "2024-03", "2024-04", "2024-05", "2024-06",
    ]
    assert trend[-1]["month_label"] == "Jun 2024"
    assert trend[4]["income"] == Decimal("500.00")

    # 2 income, 2 expense and 1 charity payment ledger rows
    assert len(report["recent_transactions"]) == 5
    statuses = {row["status"]: row["count"] for row in report["charity_overview"]}
    assert statuses == {"paid": 1, "pending": 1}


@pytest.mark.parametrize(
    ("period", "expected"),
    [
        ("month", ["2024-05", "2024-06"]),
        ("quarter", ["2024-Q2"]),
        ("year", ["2024"]),
    ],
)
def test_analytics_buckets(service: DashboardService, period: str, expected: list[str]) -> None:
    report = service.analytics(AnalyticsQuery(period=period, year=2024), today=TODAY)

    assert [row["period"] for row in report["profit_analysis"]] == expected
    assert report["year"] == 2024


def test_analytics_monthly_profit_margin(service: DashboardService) -> None:
    report = service.analytics(AnalyticsQuery(period="month", year=2024), today=TODAY)

    june = report["profit_analysis"][-1]
    assert june["profit"] == Decimal("700.00")
    assert june["profit_margin"] == Decimal("70.00")
    business = next(row for row in report["income_analytics"] if row["category"] == "Business")
    assert business["charity_generated"] == Decimal("60.00")


def test_analytics_weeks(service: DashboardService) -> None:
    report = service.analytics(AnalyticsQuery(period="week", year=2024), today=TODAY)

    assert [row["period"] for row in report["profit_analysis"]] == [
        "2024-W17", "2024-W18", "2024-W21", "2024-W22",
    ]


def test_metrics(service: DashboardService) -> None:
    metrics = service.metrics(today=TODAY)

    kpi = metrics["kpi_metrics"]
    assert kpi["revenue_30d"] == Decimal("1000.00")
    assert kpi["revenue_90d"] == Decimal("1500.00")
    assert kpi["expenses_30d"] == Decimal("300.00")
    assert kpi["burn_rate"] == Decimal("10.00")
    assert kpi["total_accounts"] == 1
    # 60 paid, 30 still pending on the salary income
    assert kpi["charity_compliance"] == Decimal("66.67")

    trend = metrics["trend_comparison"]
    assert trend["current_month"] == {"income": Decimal("1000.00"), "expenses": Decimal("300.00")}
    assert trend["previous_month"] == {"income": Decimal("500.00"), "expenses": Decimal("100.00")}
    assert metrics["growth_rates"]["income_growth"] == Decimal("100.00")
