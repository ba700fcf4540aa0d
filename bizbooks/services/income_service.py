"""Income bookkeeping: CRUD with charity accrual and ledger entries."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from sqlalchemy import delete, extract, func, select, update

from bizbooks.core.log import get_logger
from bizbooks.db import transaction
from bizbooks.domain import derived
from bizbooks.models import Charity, CharityStatus, Income, TransactionType
from bizbooks.schemas.income import IncomeCreate, IncomeListQuery, IncomeUpdate
from bizbooks.web.pagination import PageInfo

from .audit import AuditTrail
from .base import UserScopedService, as_date, money

LOGGER = get_logger(__name__)

REFERENCE_TABLE = "income"
NOT_FOUND = "Income record not found"


@dataclass(frozen=True)
class IncomeCreated:
    """Income row plus the charity obligation accrued alongside it."""

    income: Income
    charity: Charity


class IncomeService(UserScopedService):
    """Facade for income records owned by a single user."""

    def list_records(self, query: IncomeListQuery) -> tuple[list[Income], PageInfo]:
        stmt = select(Income).where(Income.user_id == self._user_id)
        if query.category:
            stmt = stmt.where(Income.category == query.category)
        if query.start_date:
            stmt = stmt.where(Income.date >= query.start_date)
        if query.end_date:
            stmt = stmt.where(Income.date <= query.end_date)

        column = getattr(Income, query.sort_by)
        if query.sort_order == "asc":
            stmt = stmt.order_by(column.asc(), Income.id.asc())
        else:
            stmt = stmt.order_by(column.desc(), Income.id.desc())

        rows, info = self._paginate(stmt, page=query.page, limit=query.limit)
        return [row[0] for row in rows], info

    def get(self, income_id: int) -> Income:
        return self._get_owned(Income, income_id, message=NOT_FOUND)

    def create(self, payload: IncomeCreate) -> IncomeCreated:
        """Insert income, its 6% charity obligation and the ledger row atomically."""

        label = payload.description or payload.category
        with transaction(self._session):
            income = Income(
                user_id=self._user_id,
                amount=derived.round_money(payload.amount),
                description=payload.description,
                category=payload.category,
                source=payload.source,
                date=payload.date,
                charity_required=derived.charity_required(payload.amount),
            )
            self._session.add(income)
            self._session.flush()

            charity = Charity(
                user_id=self._user_id,
                income_id=income.id,
                amount_required=income.charity_required,
                amount_paid=Decimal("0.00"),
                amount_remaining=income.charity_required,
                status=CharityStatus.PENDING,
                description=f"Charity for income: {label}",
            )
            self._session.add(charity)

            AuditTrail(self._session, self._user_id).record(
                TransactionType.INCOME,
                income.amount,
                income.date,
                description=f"Income: {label}",
                reference_table=REFERENCE_TABLE,
                reference_id=income.id,
            )
        LOGGER.info("Recorded income #%s (%s) for user %s", income.id, income.amount, self._user_id)
        return IncomeCreated(income=income, charity=charity)

    def update(self, income_id: int, payload: IncomeUpdate) -> Income:
        """Apply the provided fields; a new amount re-derives the linked charity."""

        changes = payload.provided_fields()
        with transaction(self._session):
            income = self._get_owned(Income, income_id, message=NOT_FOUND, for_update=True)
            previous_amount = income.amount
            if "amount" in changes:
                changes["amount"] = derived.round_money(changes["amount"])
                changes["charity_required"] = derived.charity_required(changes["amount"])
            self._apply_changes(income, changes)
            self._session.flush()

            if "amount" in changes and changes["amount"] != previous_amount:
                required = income.charity_required
                self._session.execute(
                    update(Charity)
                    .where(Charity.income_id == income.id, Charity.user_id == self._user_id)
                    .values(
                        amount_required=required,
                        amount_remaining=required - Charity.amount_paid,
                    )
                    .execution_options(synchronize_session=False)
                )
        self._session.refresh(income)
        return income

    def delete(self, income_id: int) -> None:
        with transaction(self._session):
            income = self._get_owned(Income, income_id, message=NOT_FOUND, for_update=True)
            self._session.execute(
                delete(Charity)
                .where(Charity.income_id == income.id, Charity.user_id == self._user_id)
                .execution_options(synchronize_session=False)
            )
            AuditTrail(self._session, self._user_id).remove(REFERENCE_TABLE, income.id)
            self._session.delete(income)
        LOGGER.info("Deleted income #%s for user %s", income_id, self._user_id)

    def stats(self, *, today: dt.date | None = None) -> dict[str, Any]:
        today = today or dt.date.today()
        owned = Income.user_id == self._user_id

        totals = self._session.execute(
            select(
                func.count(Income.id),
                func.sum(Income.amount),
                func.avg(Income.amount),
                func.sum(Income.charity_required),
                func.min(Income.date),
                func.max(Income.date),
            ).where(owned)
        ).one()

        month = extract("month", Income.date)
        monthly = self._session.execute(
            select(month.label("month"), func.sum(Income.amount), func.count(Income.id))
            .where(owned, extract("year", Income.date) == today.year)
            .group_by(month)
            .order_by(month)
        ).all()

        total_amount = func.sum(Income.amount)
        by_category = self._session.execute(
            select(Income.category, func.count(Income.id), total_amount, func.avg(Income.amount))
            .where(owned)
            .group_by(Income.category)
            .order_by(total_amount.desc())
        ).all()

        return {
            "summary": {
                "total_records": totals[0],
                "total_income": money(totals[1]),
                "average_income": money(totals[2]),
                "total_charity_required": money(totals[3]),
                "earliest_date": as_date(totals[4]),
                "latest_date": as_date(totals[5]),
            },
            "monthly": [
                {
                    "month": int(row[0]),
                    "year": today.year,
                    "monthly_income": money(row[1]),
                    "monthly_count": row[2],
                }
                for row in monthly
            ],
            "by_category": [
                {
                    "category": row[0],
                    "count": row[1],
                    "total_amount": money(row[2]),
                    "average_amount": money(row[3]),
                }
                for row in by_category
            ],
        }


__all__ = ["IncomeCreated", "IncomeService"]
