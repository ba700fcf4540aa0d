"""Charity obligations: listing, manual entries and payments."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any

from sqlalchemy import Row, case, extract, func, select

from bizbooks.core.errors import BusinessRuleError, NotFoundError
from bizbooks.core.log import get_logger
from bizbooks.db import transaction
from bizbooks.domain import derived
from bizbooks.models import Charity, CharityStatus, Income, TransactionType
from bizbooks.schemas.charity import (
    CharityCreate,
    CharityListQuery,
    CharityPaymentCreate,
    CharityUpdate,
)
from bizbooks.web.pagination import PageInfo

from .audit import AuditTrail
from .base import UserScopedService, as_date, money

LOGGER = get_logger(__name__)

REFERENCE_TABLE = "charity"
NOT_FOUND = "Charity record not found"


class CharityService(UserScopedService):
    def _joined(self):
        return select(Charity, Income.amount, Income.description, Income.date).outerjoin(
            Income, Charity.income_id == Income.id
        )

    def _fetch_joined(self, charity_id: int) -> Row:
        row = self._session.execute(
            self._joined().where(Charity.id == charity_id, Charity.user_id == self._user_id)
        ).one_or_none()
        if row is None:
            raise NotFoundError(NOT_FOUND)
        return row

    def list_records(self, query: CharityListQuery) -> tuple[list[Row], PageInfo]:
        stmt = self._joined().where(Charity.user_id == self._user_id)
        if query.status:
            stmt = stmt.where(Charity.status == query.status)
        if query.start_date:
            stmt = stmt.where(Charity.created_at >= query.start_date)
        if query.end_date:
            stmt = stmt.where(Charity.created_at < query.end_date + dt.timedelta(days=1))

        column = getattr(Charity, query.sort_by)
        if query.sort_order == "asc":
            stmt = stmt.order_by(column.asc(), Charity.id.asc())
        else:
            stmt = stmt.order_by(column.desc(), Charity.id.desc())
        return self._paginate(stmt, page=query.page, limit=query.limit)

    def get(self, charity_id: int) -> Row:
        return self._fetch_joined(charity_id)

    def create_manual(self, payload: CharityCreate) -> Charity:
        required = derived.round_money(payload.amount_required)
        with transaction(self._session):
            charity = Charity(
                user_id=self._user_id,
                amount_required=required,
                amount_paid=Decimal("0.00"),
                amount_remaining=required,
                status=CharityStatus.PENDING,
                description=payload.description,
                recipient=payload.recipient,
            )
            self._session.add(charity)
        LOGGER.info("Created manual charity #%s (%s)", charity.id, required)
        return charity

    def record_payment(self, payload: CharityPaymentCreate) -> Row:
        """Apply a payment against one obligation.

        The row is locked for the duration of the transaction so concurrent
        payments cannot both pass the remaining-balance check.
        """

        amount = derived.round_money(payload.payment_amount)
        with transaction(self._session):
            charity = self._get_owned(
                Charity, payload.charity_id, message=NOT_FOUND, for_update=True
            )
            if amount > charity.amount_remaining:
                raise BusinessRuleError(
                    "Payment amount cannot exceed remaining balance of "
                    f"{charity.amount_remaining}"
                )
            paid = derived.round_money(charity.amount_paid + amount)
            charity.amount_paid = paid
            charity.amount_remaining = derived.charity_remaining(charity.amount_required, paid)
            charity.status = derived.charity_status(charity.amount_required, paid)
            charity.payment_date = payload.payment_date
            if payload.recipient is not None:
                charity.recipient = payload.recipient
            if payload.description is not None:
                charity.description = payload.description
            self._session.flush()

            AuditTrail(self._session, self._user_id).record(
                TransactionType.CHARITY,
                amount,
                payload.payment_date,
                description=f"Charity payment: {payload.description or 'Charity contribution'}",
                reference_table=REFERENCE_TABLE,
                reference_id=charity.id,
            )
        self._session.refresh(charity)
        LOGGER.info(
            "Charity #%s paid %s, now %s", charity.id, amount, charity.status.value
        )
        return self._fetch_joined(charity.id)

    def update(self, charity_id: int, payload: CharityUpdate) -> Row:
        changes = payload.provided_fields()
        with transaction(self._session):
            charity = self._get_owned(Charity, charity_id, message=NOT_FOUND, for_update=True)
            self._apply_changes(charity, changes)
        self._session.refresh(charity)
        return self._fetch_joined(charity_id)

    def delete(self, charity_id: int) -> None:
        with transaction(self._session):
            charity = self._get_owned(Charity, charity_id, message=NOT_FOUND, for_update=True)
            if charity.income_id is not None:
                raise BusinessRuleError(
                    "Cannot delete auto-generated charity records. "
                    "Delete the related income record instead."
                )
            AuditTrail(self._session, self._user_id).remove(REFERENCE_TABLE, charity.id)
            self._session.delete(charity)
        LOGGER.info("Deleted charity #%s for user %s", charity_id, self._user_id)

    def stats(self, *, today: dt.date | None = None) -> dict[str, Any]:
        today = today or dt.date.today()
        owned = Charity.user_id == self._user_id

        def status_count(status: CharityStatus):
            return func.coalesce(func.sum(case((Charity.status == status, 1), else_=0)), 0)

        totals = self._session.execute(
            select(
                func.count(Charity.id),
                func.sum(Charity.amount_required),
                func.sum(Charity.amount_paid),
                func.sum(Charity.amount_remaining),
                status_count(CharityStatus.PENDING),
                status_count(CharityStatus.PARTIAL),
                status_count(CharityStatus.PAID),
            ).where(owned)
        ).one()

        month = extract("month", Charity.payment_date)
        monthly = self._session.execute(
            select(month, func.sum(Charity.amount_paid), func.count(Charity.id))
            .where(
                owned,
                Charity.payment_date.is_not(None),
                extract("year", Charity.payment_date) == today.year,
            )
            .group_by(month)
            .order_by(month)
        ).all()

        recent = self._session.execute(
            select(Charity, Income.description)
            .outerjoin(Income, Charity.income_id == Income.id)
            .where(owned)
            .order_by(Charity.updated_at.desc(), Charity.id.desc())
            .limit(10)
        ).all()

        return {
            "summary": {
                "total_records": totals[0],
                "total_required": money(totals[1]),
                "total_paid": money(totals[2]),
                "total_remaining": money(totals[3]),
                "pending_count": int(totals[4]),
                "partial_count": int(totals[5]),
                "paid_count": int(totals[6]),
            },
            "monthly_payments": [
                {
                    "month": int(row[0]),
                    "year": today.year,
                    "monthly_payments": money(row[1]),
                    "monthly_count": row[2],
                }
                for row in monthly
            ],
            "recent_activities": [
                {
                    "id": charity.id,
                    "amount_required": charity.amount_required,
                    "amount_paid": charity.amount_paid,
                    "amount_remaining": charity.amount_remaining,
                    "status": charity.status.value,
                    "description": charity.description,
                    "payment_date": as_date(charity.payment_date),
                    "created_at": charity.created_at,
                    "income_description": income_description,
                }
                for charity, income_description in recent
            ],
        }


__all__ = ["CharityService"]
