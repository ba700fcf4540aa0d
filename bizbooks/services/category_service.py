"""User categories and their usage across the ledgers."""
from __future__ import annotations

import calendar
import datetime as dt
from decimal import Decimal
from typing import Any

from sqlalchemy import extract, func, select
from sqlalchemy.exc import IntegrityError

from bizbooks.core.errors import BusinessRuleError, ConflictError
from bizbooks.core.log import get_logger
from bizbooks.db import transaction
from bizbooks.models import Category, CategoryType, Expense, Income, Purchase, Sale
from bizbooks.schemas.categories import CategoryCreate, CategoryListQuery, CategoryUpdate

from .base import UserScopedService, as_date, money, optional_money

LOGGER = get_logger(__name__)

NOT_FOUND = "Category not found"
DUPLICATE = "Category with this name and type already exists"

# Ledger table and summed column per category type.
_USAGE_SOURCES = {
    CategoryType.INCOME: (Income, Income.amount),
    CategoryType.EXPENSE: (Expense, Expense.amount),
    CategoryType.PURCHASE: (Purchase, Purchase.amount),
    CategoryType.SALE: (Sale, Sale.selling_price),
}


class CategoryService(UserScopedService):
    def list_categories(
        self, query: CategoryListQuery
    ) -> tuple[list[Category], dict[str, list[Category]]]:
        stmt = select(Category).where(Category.user_id == self._user_id)
        if query.type:
            stmt = stmt.where(Category.type == query.type)
        categories = list(
            self._session.execute(stmt.order_by(Category.type, Category.name)).scalars()
        )
        grouped: dict[str, list[Category]] = {}
        for category in categories:
            grouped.setdefault(category.type.value, []).append(category)
        return categories, grouped

    def get(self, category_id: int) -> Category:
        return self._get_owned(Category, category_id, message=NOT_FOUND)

    def _exists(self, name: str, category_type: CategoryType, *, exclude_id: int | None = None) -> bool:
        stmt = select(Category.id).where(
            Category.user_id == self._user_id,
            Category.name == name,
            Category.type == category_type,
        )
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        return self._session.execute(stmt).first() is not None

    def create(self, payload: CategoryCreate) -> Category:
        with transaction(self._session):
            if self._exists(payload.name, payload.type):
                raise ConflictError(DUPLICATE)
            category = Category(
                user_id=self._user_id,
                name=payload.name,
                type=payload.type,
                color=payload.color,
                icon=payload.icon,
            )
            self._session.add(category)
            try:
                self._session.flush()
            except IntegrityError as exc:
                raise ConflictError(DUPLICATE) from exc
        return category

    def update(self, category_id: int, payload: CategoryUpdate) -> Category:
        changes = payload.provided_fields()
        with transaction(self._session):
            category = self._get_owned(Category, category_id, message=NOT_FOUND, for_update=True)
            name = changes.get("name")
            if name is not None and self._exists(name, category.type, exclude_id=category.id):
                raise ConflictError(DUPLICATE)
            self._apply_changes(category, changes)
            try:
                self._session.flush()
            except IntegrityError as exc:
                raise ConflictError(DUPLICATE) from exc
        return category

    def _count_by_name(self, model: Any, name: str) -> int:
        return self._session.execute(
            select(func.count(model.id)).where(model.user_id == self._user_id, model.category == name)
        ).scalar_one()

    def delete(self, category_id: int) -> None:
        with transaction(self._session):
            category = self._get_owned(Category, category_id, message=NOT_FOUND, for_update=True)
            usage = {
                "income_count": self._count_by_name(Income, category.name),
                "expense_count": self._count_by_name(Expense, category.name),
                "purchase_count": self._count_by_name(Purchase, category.name),
            }
            if any(usage.values()):
                raise BusinessRuleError(
                    "Cannot delete category that is being used in transactions", data=usage
                )
            self._session.delete(category)
        LOGGER.info("Deleted category #%s for user %s", category_id, self._user_id)

    def stats(self, category_id: int, *, today: dt.date | None = None) -> dict[str, Any]:
        today = today or dt.date.today()
        category = self.get(category_id)
        model, amount = _USAGE_SOURCES[category.type]
        matches = (model.user_id == self._user_id, model.category == category.name)

        usage = self._session.execute(
            select(
                func.count(model.id),
                func.sum(amount),
                func.avg(amount),
                func.min(amount),
                func.max(amount),
                func.min(model.date),
                func.max(model.date),
            ).where(*matches)
        ).one()

        month = extract("month", model.date)
        monthly = self._session.execute(
            select(month, func.sum(amount), func.count(model.id))
            .where(*matches, extract("year", model.date) == today.year)
            .group_by(month)
            .order_by(month)
        ).all()

        return {
            "category": category,
            "usage_stats": {
                "transaction_count": usage[0],
                "total_amount": money(usage[1]),
                "average_amount": money(usage[2]),
                "min_amount": optional_money(usage[3]),
                "max_amount": optional_money(usage[4]),
                "earliest_date": as_date(usage[5]),
                "latest_date": as_date(usage[6]),
            },
            "monthly_breakdown": [
                {
                    "month": int(row[0]),
                    "month_name": calendar.month_name[int(row[0])],
                    "monthly_amount": money(row[1]),
                    "monthly_count": row[2],
                }
                for row in monthly
            ],
        }

    def usage_summary(self) -> list[dict[str, Any]]:
        """Every category with its transaction count and total, busiest first per type."""

        usage: dict[tuple[CategoryType, str], tuple[int, Decimal]] = {}
        for category_type, (model, amount) in _USAGE_SOURCES.items():
            rows = self._session.execute(
                select(model.category, func.count(model.id), func.sum(amount))
                .where(model.user_id == self._user_id)
                .group_by(model.category)
            ).all()
            for name, count, total in rows:
                usage[(category_type, name)] = (count, money(total))

        categories, _ = self.list_categories(CategoryListQuery())
        summary = []
        for category in categories:
            count, total = usage.get((category.type, category.name), (0, money(None)))
            summary.append(
                {
                    "id": category.id,
                    "name": category.name,
                    "type": category.type.value,
                    "color": category.color,
                    "icon": category.icon,
                    "created_at": category.created_at,
                    "transaction_count": count,
                    "total_amount": total,
                }
            )
        summary.sort(key=lambda item: (item["type"], -item["total_amount"], item["name"]))
        return summary


__all__ = ["CategoryService"]
