"""Expense and purchase bookkeeping.

Expenses and purchases share one table layout and one lifecycle: every
insert, edit and delete of the primary row is mirrored in the audit ledger.
"""
from __future__ import annotations

import datetime as dt
from typing import Any, ClassVar

from sqlalchemy import extract, func, select

from bizbooks.core.log import get_logger
from bizbooks.db import transaction
from bizbooks.domain.derived import round_money
from bizbooks.models import Expense, Purchase, SpendingRecord, TransactionType
from bizbooks.schemas.spending import SpendingCreate, SpendingListQuery, SpendingUpdate
from bizbooks.web.pagination import PageInfo

from .audit import AuditTrail
from .base import UserScopedService, as_date, money

LOGGER = get_logger(__name__)


class SpendingService(UserScopedService):
    """Shared implementation; subclasses bind the model and ledger labels."""

    model: ClassVar[type[SpendingRecord]]
    transaction_type: ClassVar[TransactionType]
    reference_table: ClassVar[str]
    label: ClassVar[str]
    noun: ClassVar[str]

    @property
    def not_found_message(self) -> str:
        return f"{self.label} record not found"

    def _ledger_description(self, record: SpendingRecord) -> str:
        return f"{self.label}: {record.description or record.category}"

    def list_records(self, query: SpendingListQuery) -> tuple[list[SpendingRecord], PageInfo]:
        model = self.model
        stmt = select(model).where(model.user_id == self._user_id)
        if query.category:
            stmt = stmt.where(model.category == query.category)
        if query.payment_method:
            stmt = stmt.where(model.payment_method == query.payment_method)
        if query.start_date:
            stmt = stmt.where(model.date >= query.start_date)
        if query.end_date:
            stmt = stmt.where(model.date <= query.end_date)

        column = getattr(model, query.sort_by)
        if query.sort_order == "asc":
            stmt = stmt.order_by(column.asc(), model.id.asc())
        else:
            stmt = stmt.order_by(column.desc(), model.id.desc())

        rows, info = self._paginate(stmt, page=query.page, limit=query.limit)
        return [row[0] for row in rows], info

    def get(self, record_id: int) -> SpendingRecord:
        return self._get_owned(self.model, record_id, message=self.not_found_message)

    def create(self, payload: SpendingCreate) -> SpendingRecord:
        with transaction(self._session):
            record = self.model(
                user_id=self._user_id,
                amount=round_money(payload.amount),
                description=payload.description,
                category=payload.category,
                payment_method=payload.payment_method,
                date=payload.date,
                receipt_path=payload.receipt_path,
            )
            self._session.add(record)
            self._session.flush()
            AuditTrail(self._session, self._user_id).record(
                self.transaction_type,
                record.amount,
                record.date,
                description=self._ledger_description(record),
                reference_table=self.reference_table,
                reference_id=record.id,
            )
        LOGGER.info("Recorded %s #%s (%s)", self.noun, record.id, record.amount)
        return record

    def update(self, record_id: int, payload: SpendingUpdate) -> SpendingRecord:
        changes = payload.provided_fields()
        if "amount" in changes:
            changes["amount"] = round_money(changes["amount"])
        with transaction(self._session):
            record = self._get_owned(
                self.model, record_id, message=self.not_found_message, for_update=True
            )
            self._apply_changes(record, changes)
            self._session.flush()
            AuditTrail(self._session, self._user_id).revise(
                self.reference_table,
                record.id,
                amount=record.amount,
                description=self._ledger_description(record),
                entry_date=record.date,
            )
        self._session.refresh(record)
        return record

    def delete(self, record_id: int) -> None:
        with transaction(self._session):
            record = self._get_owned(
                self.model, record_id, message=self.not_found_message, for_update=True
            )
            AuditTrail(self._session, self._user_id).remove(self.reference_table, record.id)
            self._session.delete(record)
        LOGGER.info("Deleted %s #%s for user %s", self.noun, record_id, self._user_id)

    def stats(self, *, today: dt.date | None = None) -> dict[str, Any]:
        today = today or dt.date.today()
        model = self.model
        owned = model.user_id == self._user_id
        noun = self.noun
        plural = self.reference_table

        totals = self._session.execute(
            select(
                func.count(model.id),
                func.sum(model.amount),
                func.avg(model.amount),
                func.min(model.date),
                func.max(model.date),
            ).where(owned)
        ).one()

        month = extract("month", model.date)
        monthly = self._session.execute(
            select(month, func.sum(model.amount), func.count(model.id))
            .where(owned, extract("year", model.date) == today.year)
            .group_by(month)
            .order_by(month)
        ).all()

        total_amount = func.sum(model.amount)
        by_category = self._session.execute(
            select(model.category, func.count(model.id), total_amount, func.avg(model.amount))
            .where(owned)
            .group_by(model.category)
            .order_by(total_amount.desc())
        ).all()
        by_payment_method = self._session.execute(
            select(model.payment_method, func.count(model.id), total_amount)
            .where(owned)
            .group_by(model.payment_method)
            .order_by(total_amount.desc())
        ).all()

        return {
            "summary": {
                "total_records": totals[0],
                f"total_{plural}": money(totals[1]),
                f"average_{noun}": money(totals[2]),
                "earliest_date": as_date(totals[3]),
                "latest_date": as_date(totals[4]),
            },
            "monthly": [
                {
                    "month": int(row[0]),
                    "year": today.year,
                    f"monthly_{plural}": money(row[1]),
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
            "by_payment_method": [
                {"payment_method": row[0], "count": row[1], "total_amount": money(row[2])}
                for row in by_payment_method
            ],
        }


class ExpenseService(SpendingService):
    model = Expense
    transaction_type = TransactionType.EXPENSE
    reference_table = "expenses"
    label = "Expense"
    noun = "expense"


class PurchaseService(SpendingService):
    model = Purchase
    transaction_type = TransactionType.PURCHASE
    reference_table = "purchases"
    label = "Purchase"
    noun = "purchase"


__all__ = ["ExpenseService", "PurchaseService", "SpendingService"]
