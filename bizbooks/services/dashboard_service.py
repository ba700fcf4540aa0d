"""Read-only dashboard reports aggregated across every ledger."""
from __future__ import annotations

import datetime as dt
import logging
from collections import defaultdict
from decimal import Decimal
from typing import Any, Callable, Iterable

from sqlalchemy import extract, func, select

from bizbooks.core.log import get_logger, timeit
from bizbooks.domain import derived
from bizbooks.models import (
    Account,
    Charity,
    CharityStatus,
    Expense,
    Income,
    Loan,
    LoanStatus,
    Transaction,
)
from bizbooks.schemas.dashboard import AnalyticsPeriod, AnalyticsQuery

from .base import MONTH_ABBREVIATIONS, UserScopedService, money

LOGGER = get_logger(__name__)

_ZERO = Decimal("0")


def _first_of_month(day: dt.date) -> dt.date:
    return day.replace(day=1)


def _shift_months(day: dt.date, months: int) -> dt.date:
    """First day of the month ``months`` away from ``day``'s month."""

    index = day.year * 12 + (day.month - 1) + months
    return dt.date(index // 12, index % 12 + 1, 1)


def _bucket_key(period: AnalyticsPeriod) -> Callable[[dt.date], str]:
    if period == "week":
        # Sunday-based week numbers, days before the first Sunday fall in week 0.
        return lambda day: f"{day.year}-W{int(day.strftime('%U')):02d}"
    if period == "quarter":
        return lambda day: f"{day.year}-Q{(day.month - 1) // 3 + 1}"
    if period == "year":
        return lambda day: str(day.year)
    return lambda day: f"{day.year}-{day.month:02d}"


class DashboardService(UserScopedService):
    """Financial overview, period analytics and KPI metrics for one user."""

    def _total(self, column, *criteria) -> Decimal:
        return money(self._session.execute(select(func.sum(column)).where(*criteria)).scalar())

    def _count(self, column, *criteria) -> int:
        return self._session.execute(select(func.count(column)).where(*criteria)).scalar_one()

    def _monthly_sums(self, column, date_column, year: int, *criteria) -> dict[int, Decimal]:
        month = extract("month", date_column)
        rows = self._session.execute(
            select(month, func.sum(column))
            .where(*criteria, extract("year", date_column) == year)
            .group_by(month)
        ).all()
        return {int(row[0]): money(row[1]) for row in rows}

    # -- summary -----------------------------------------------------------------

    def summary(self, *, today: dt.date | None = None) -> dict[str, Any]:
        today = today or dt.date.today()
        with timeit(
            "Dashboard summary",
            logger=LOGGER,
            level=logging.DEBUG,
            track_db_calls=True,
            session=self._session,
        ):
            return {
                "summary": self._financial_summary(),
                "monthly_data": self._monthly_data(today.year),
                "recent_transactions": self._recent_transactions(),
                "top_expense_categories": self._top_expense_categories(),
                "trend_data": self._trend(today),
                "charity_overview": self._charity_overview(),
            }

    def _financial_summary(self) -> dict[str, Decimal]:
        uid = self._user_id
        total_income = self._total(Income.amount, Income.user_id == uid)
        total_expenses = self._total(Expense.amount, Expense.user_id == uid)
        balances = self._total(Account.balance, Account.user_id == uid)
        active_loans = self._total(
            Loan.current_balance, Loan.user_id == uid, Loan.status == LoanStatus.ACTIVE
        )
        return {
            "total_income": total_income,
            "total_expenses": total_expenses,
            "total_accounts_balance": balances,
            "total_active_loans": active_loans,
            "total_charity_required": self._total(Charity.amount_required, Charity.user_id == uid),
            "total_charity_paid": self._total(Charity.amount_paid, Charity.user_id == uid),
            "total_charity_remaining": self._total(Charity.amount_remaining, Charity.user_id == uid),
            "net_worth": total_income - total_expenses,
            "available_cash": balances - active_loans,
        }

    def _monthly_data(self, year: int) -> list[dict[str, Any]]:
        uid = self._user_id
        income = self._monthly_sums(Income.amount, Income.date, year, Income.user_id == uid)
        expenses = self._monthly_sums(Expense.amount, Expense.date, year, Expense.user_id == uid)
        charity = self._monthly_sums(
            Charity.amount_paid,
            Charity.payment_date,
            year,
            Charity.user_id == uid,
            Charity.payment_date.is_not(None),
        )
        zero = money(None)
        data = []
        for month_num, name in enumerate(MONTH_ABBREVIATIONS, start=1):
            monthly_income = income.get(month_num, zero)
            monthly_expenses = expenses.get(month_num, zero)
            data.append(
                {
                    "month_num": month_num,
                    "month_name": name,
                    "monthly_income": monthly_income,
                    "monthly_expenses": monthly_expenses,
                    "monthly_charity": charity.get(month_num, zero),
                    "monthly_profit": monthly_income - monthly_expenses,
                }
            )
        return data

    def _recent_transactions(self, limit: int = 10) -> list[dict[str, Any]]:
        entries = self._session.execute(
            select(Transaction)
            .where(Transaction.user_id == self._user_id)
            .order_by(Transaction.created_at.desc(), Transaction.id.desc())
            .limit(limit)
        ).scalars()
        return [
            {
                "id": entry.id,
                "transaction_type": entry.transaction_type.value,
                "amount": entry.amount,
                "description": entry.description,
                "date": entry.date,
                "created_at": entry.created_at,
                "reference_table": entry.reference_table,
                "reference_id": entry.reference_id,
            }
            for entry in entries
        ]

    def _top_expense_categories(self, limit: int = 5) -> list[dict[str, Any]]:
        owned = Expense.user_id == self._user_id
        grand_total = self._total(Expense.amount, owned)
        total = func.sum(Expense.amount)
        rows = self._session.execute(
            select(Expense.category, total, func.count(Expense.id))
            .where(owned)
            .group_by(Expense.category)
            .order_by(total.desc())
            .limit(limit)
        ).all()
        return [
            {
                "category": row[0],
                "total_amount": money(row[1]),
                "transaction_count": row[2],
                "percentage": derived.percentage(money(row[1]), grand_total),
            }
            for row in rows
        ]

    def _trend(self, today: dt.date, months: int = 6) -> list[dict[str, Any]]:
        """Income and expenses for the last ``months`` months, oldest first."""

        starts = [_shift_months(today, -offset) for offset in range(months - 1, -1, -1)]
        window = (starts[0], _shift_months(today, 1))
        income = self._sum_by_month(Income, window)
        expenses = self._sum_by_month(Expense, window)
        zero = money(None)
        return [
            {
                "month": f"{start.year}-{start.month:02d}",
                "month_label": f"{MONTH_ABBREVIATIONS[start.month - 1]} {start.year}",
                "income": income.get((start.year, start.month), zero),
                "expenses": expenses.get((start.year, start.month), zero),
            }
            for start in starts
        ]

    def _sum_by_month(self, model, window: tuple[dt.date, dt.date]) -> dict[tuple[int, int], Decimal]:
        year = extract("year", model.date)
        month = extract("month", model.date)
        rows = self._session.execute(
            select(year, month, func.sum(model.amount))
            .where(model.user_id == self._user_id, model.date >= window[0], model.date < window[1])
            .group_by(year, month)
        ).all()
        return {(int(row[0]), int(row[1])): money(row[2]) for row in rows}

    def _charity_overview(self) -> list[dict[str, Any]]:
        rows = self._session.execute(
            select(
                Charity.status,
                func.count(Charity.id),
                func.sum(Charity.amount_required),
                func.sum(Charity.amount_paid),
                func.sum(Charity.amount_remaining),
            )
            .where(Charity.user_id == self._user_id)
            .group_by(Charity.status)
        ).all()
        return [
            {
                "status": row[0].value,
                "count": row[1],
                "total_required": money(row[2]),
                "total_paid": money(row[3]),
                "total_remaining": money(row[4]),
            }
            for row in rows
        ]

    # -- analytics ---------------------------------------------------------------

    def analytics(self, query: AnalyticsQuery, *, today: dt.date | None = None) -> dict[str, Any]:
        """Income, expense and profit figures bucketed by ``query.period``.

        ``week`` covers the twelve weeks up to the current one in ``year``;
        ``month`` and ``quarter`` cover ``year``; ``year`` covers five years
        ending with ``year``.
        """

        today = today or dt.date.today()
        year = query.year or today.year
        period = query.period
        key = _bucket_key(period)

        first_year = year - 4 if period == "year" else year
        window = (dt.date(first_year, 1, 1), dt.date(year + 1, 1, 1))
        floor = int(today.strftime("%U")) - 12 if period == "week" else None

        def keep(day: dt.date) -> bool:
            return floor is None or int(day.strftime("%U")) >= floor

        with timeit(
            f"Dashboard analytics ({period})",
            logger=LOGGER,
            level=logging.DEBUG,
            track_db_calls=True,
            session=self._session,
        ):
            income_rows = [
                row
                for row in self._session.execute(
                    select(Income.date, Income.category, Income.amount, Income.charity_required)
                    .where(
                        Income.user_id == self._user_id,
                        Income.date >= window[0],
                        Income.date < window[1],
                    )
                ).all()
                if keep(row[0])
            ]
            expense_rows = [
                row
                for row in self._session.execute(
                    select(Expense.date, Expense.category, Expense.amount).where(
                        Expense.user_id == self._user_id,
                        Expense.date >= window[0],
                        Expense.date < window[1],
                    )
                ).all()
                if keep(row[0])
            ]

        income_analytics = _category_buckets(income_rows, key, with_charity=True)
        expense_analytics = _category_buckets(expense_rows, key, with_charity=False)

        income_by_period = _period_totals(income_rows, key)
        expenses_by_period = _period_totals(expense_rows, key)
        profit_analysis = []
        for bucket in sorted(set(income_by_period) | set(expenses_by_period)):
            income = income_by_period.get(bucket, money(None))
            expenses = expenses_by_period.get(bucket, money(None))
            profit_analysis.append(
                {
                    "period": bucket,
                    "income": income,
                    "expenses": expenses,
                    "profit": income - expenses,
                    "profit_margin": derived.percentage(income - expenses, income),
                }
            )

        return {
            "period": period,
            "year": year,
            "income_analytics": income_analytics,
            "expense_analytics": expense_analytics,
            "profit_analysis": profit_analysis,
        }

    # -- metrics -----------------------------------------------------------------

    def metrics(self, *, today: dt.date | None = None) -> dict[str, Any]:
        today = today or dt.date.today()
        uid = self._user_id
        since_30 = today - dt.timedelta(days=30)
        since_90 = today - dt.timedelta(days=90)

        with timeit(
            "Dashboard metrics",
            logger=LOGGER,
            level=logging.DEBUG,
            track_db_calls=True,
            session=self._session,
        ):
            revenue_30d = self._total(Income.amount, Income.user_id == uid, Income.date >= since_30)
            revenue_90d = self._total(Income.amount, Income.user_id == uid, Income.date >= since_90)
            expenses_30d = self._total(
                Expense.amount, Expense.user_id == uid, Expense.date >= since_30
            )
            expenses_90d = self._total(
                Expense.amount, Expense.user_id == uid, Expense.date >= since_90
            )
            avg_income_30d = money(
                self._session.execute(
                    select(func.avg(Income.amount)).where(
                        Income.user_id == uid, Income.date >= since_30
                    )
                ).scalar()
            )
            avg_expense_30d = money(
                self._session.execute(
                    select(func.avg(Expense.amount)).where(
                        Expense.user_id == uid, Expense.date >= since_30
                    )
                ).scalar()
            )
            charity_paid_30d = self._total(
                Charity.amount_paid, Charity.user_id == uid, Charity.payment_date >= since_30
            )
            charity_pending = self._total(
                Charity.amount_remaining,
                Charity.user_id == uid,
                Charity.status != CharityStatus.PAID,
            )
            total_accounts = self._count(Account.id, Account.user_id == uid)
            active_loans = self._count(
                Loan.id, Loan.user_id == uid, Loan.status == LoanStatus.ACTIVE
            )

            month_start = _first_of_month(today)
            current = self._month_totals(month_start, _shift_months(today, 1))
            previous = self._month_totals(_shift_months(today, -1), month_start)

        if charity_pending == _ZERO:
            compliance = derived.round_money(Decimal("100"))
        else:
            compliance = derived.percentage(charity_paid_30d, charity_paid_30d + charity_pending)

        return {
            "kpi_metrics": {
                "revenue_30d": revenue_30d,
                "revenue_90d": revenue_90d,
                "expenses_30d": expenses_30d,
                "expenses_90d": expenses_90d,
                "avg_income_30d": avg_income_30d,
                "avg_expense_30d": avg_expense_30d,
                "charity_paid_30d": charity_paid_30d,
                "charity_pending": charity_pending,
                "total_accounts": total_accounts,
                "active_loans": active_loans,
                "profit_30d": revenue_30d - expenses_30d,
                "profit_90d": revenue_90d - expenses_90d,
                "burn_rate": derived.round_money(expenses_30d / 30),
                "charity_compliance": compliance,
            },
            "growth_rates": {
                "income_growth": derived.percentage(
                    current["income"] - previous["income"], previous["income"]
                ),
                "expense_growth": derived.percentage(
                    current["expenses"] - previous["expenses"], previous["expenses"]
                ),
            },
            "trend_comparison": {"current_month": current, "previous_month": previous},
        }

    def _month_totals(self, start: dt.date, end: dt.date) -> dict[str, Decimal]:
        uid = self._user_id
        return {
            "income": self._total(
                Income.amount, Income.user_id == uid, Income.date >= start, Income.date < end
            ),
            "expenses": self._total(
                Expense.amount, Expense.user_id == uid, Expense.date >= start, Expense.date < end
            ),
        }


def _period_totals(rows: Iterable[Any], key: Callable[[dt.date], str]) -> dict[str, Decimal]:
    totals: dict[str, Decimal] = defaultdict(lambda: _ZERO)
    for row in rows:
        totals[key(row[0])] += row[2]
    return {bucket: money(total) for bucket, total in totals.items()}


def _category_buckets(
    rows: Iterable[Any], key: Callable[[dt.date], str], *, with_charity: bool
) -> list[dict[str, Any]]:
    """Group ``(date, category, amount[, charity])`` rows by period and category."""

    groups: dict[tuple[str, str], list[Any]] = defaultdict(list)
    for row in rows:
        groups[(key(row[0]), row[1])].append(row)

    buckets = []
    for (bucket, category), members in groups.items():
        total = sum((member[2] for member in members), _ZERO)
        entry: dict[str, Any] = {
            "period": bucket,
            "total_amount": money(total),
            "transaction_count": len(members),
            "average_amount": money(total / len(members)),
            "category": category,
        }
        if with_charity:
            entry["charity_generated"] = money(sum((member[3] for member in members), _ZERO))
        buckets.append(entry)
    buckets.sort(key=lambda entry: (entry["period"], -entry["total_amount"]))
    return buckets


__all__ = ["DashboardService"]
