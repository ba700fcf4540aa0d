"""Sales with derived profit columns and purchase linkage."""
from __future__ import annotations

from typing import Any

from sqlalchemy import func, select

from bizbooks.core.errors import NotFoundError
from bizbooks.core.log import get_logger
from bizbooks.db import transaction
from bizbooks.domain import derived
from bizbooks.models import Purchase, Sale, SaleStatus, TransactionType
from bizbooks.schemas.sales import SaleCreate, SaleListQuery, SaleUpdate
from bizbooks.web.pagination import PageInfo

from .audit import AuditTrail
from .base import UserScopedService, money

LOGGER = get_logger(__name__)

REFERENCE_TABLE = "sales"
NOT_FOUND = "Sale record not found"


def _ledger_description(sale: Sale) -> str:
    return f"Sale: {sale.description or sale.category}"


class SaleService(UserScopedService):
    def list_records(self, query: SaleListQuery) -> tuple[list[Sale], PageInfo]:
        stmt = select(Sale).where(Sale.user_id == self._user_id)
        if query.category:
            stmt = stmt.where(Sale.category == query.category)
        if query.status:
            stmt = stmt.where(Sale.status == query.status)
        if query.start_date:
            stmt = stmt.where(Sale.date >= query.start_date)
        if query.end_date:
            stmt = stmt.where(Sale.date <= query.end_date)

        column = getattr(Sale, query.sort_by)
        if query.sort_order == "asc":
            stmt = stmt.order_by(column.asc(), Sale.id.asc())
        else:
            stmt = stmt.order_by(column.desc(), Sale.id.desc())

        rows, info = self._paginate(stmt, page=query.page, limit=query.limit)
        return [row[0] for row in rows], info

    def get(self, sale_id: int) -> Sale:
        return self._get_owned(Sale, sale_id, message=NOT_FOUND)

    def available_purchases(self) -> list[Purchase]:
        """Purchases of this user that no sale has been linked to yet."""

        linked = select(Sale.purchase_id).where(
            Sale.user_id == self._user_id, Sale.purchase_id.is_not(None)
        )
        stmt = (
            select(Purchase)
            .where(Purchase.user_id == self._user_id, Purchase.id.not_in(linked))
            .order_by(Purchase.date.desc(), Purchase.id.desc())
        )
        return list(self._session.execute(stmt).scalars())

    def _check_purchase(self, purchase_id: int | None) -> None:
        if purchase_id is None:
            return
        owned = self._session.execute(
            select(Purchase.id).where(
                Purchase.id == purchase_id, Purchase.user_id == self._user_id
            )
        ).scalar_one_or_none()
        if owned is None:
            raise NotFoundError("Purchase not found")

    @staticmethod
    def _derive(sale: Sale) -> None:
        sale.profit = derived.profit(sale.amount, sale.selling_price)
        sale.profit_percentage = derived.profit_percentage(sale.amount, sale.selling_price)

    def create(self, payload: SaleCreate) -> Sale:
        with transaction(self._session):
            self._check_purchase(payload.purchase_id)
            sale = Sale(
                user_id=self._user_id,
                purchase_id=payload.purchase_id,
                amount=derived.round_money(payload.amount),
                selling_price=derived.round_money(payload.selling_price),
                description=payload.description,
                category=payload.category,
                customer_name=payload.customer_name,
                customer_contact=payload.customer_contact,
                payment_method=payload.payment_method,
                date=payload.date,
                status=payload.status,
                notes=payload.notes,
            )
            self._derive(sale)
            self._session.add(sale)
            self._session.flush()
            AuditTrail(self._session, self._user_id).record(
                TransactionType.SALE,
                sale.selling_price,
                sale.date,
                description=_ledger_description(sale),
                reference_table=REFERENCE_TABLE,
                reference_id=sale.id,
            )
        LOGGER.info("Recorded sale #%s (profit %s)", sale.id, sale.profit)
        return sale

    def update(self, sale_id: int, payload: SaleUpdate) -> Sale:
        changes = payload.provided_fields()
        for field in ("amount", "selling_price"):
            if field in changes:
                changes[field] = derived.round_money(changes[field])
        with transaction(self._session):
            sale = self._get_owned(Sale, sale_id, message=NOT_FOUND, for_update=True)
            if changes.get("purchase_id") is not None:
                self._check_purchase(changes["purchase_id"])
            self._apply_changes(sale, changes)
            self._derive(sale)
            self._session.flush()
            AuditTrail(self._session, self._user_id).revise(
                REFERENCE_TABLE,
                sale.id,
                amount=sale.selling_price,
                description=_ledger_description(sale),
                entry_date=sale.date,
            )
        self._session.refresh(sale)
        return sale

    def delete(self, sale_id: int) -> None:
        with transaction(self._session):
            sale = self._get_owned(Sale, sale_id, message=NOT_FOUND, for_update=True)
            AuditTrail(self._session, self._user_id).remove(REFERENCE_TABLE, sale.id)
            self._session.delete(sale)
        LOGGER.info("Deleted sale #%s for user %s", sale_id, self._user_id)

    def stats(self) -> dict[str, Any]:
        completed = (Sale.user_id == self._user_id, Sale.status == SaleStatus.COMPLETED)
        totals = self._session.execute(
            select(
                func.count(Sale.id),
                func.sum(Sale.selling_price),
                func.sum(Sale.amount),
                func.sum(Sale.profit),
            ).where(*completed)
        ).one()

        revenue = func.sum(Sale.selling_price)
        by_category = self._session.execute(
            select(Sale.category, func.count(Sale.id), revenue, func.sum(Sale.profit))
            .where(*completed)
            .group_by(Sale.category)
            .order_by(revenue.desc())
        ).all()

        return {
            "summary": {
                "total_sales": totals[0],
                "total_revenue": money(totals[1]),
                "total_cost": money(totals[2]),
                "total_profit": money(totals[3]),
            },
            "by_category": [
                {
                    "category": row[0],
                    "count": row[1],
                    "total_revenue": money(row[2]),
                    "total_profit": money(row[3]),
                }
                for row in by_category
            ],
        }


__all__ = ["SaleService"]
