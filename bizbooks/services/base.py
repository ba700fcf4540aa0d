"""Shared plumbing for services that operate on one user's books."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from bizbooks.core.errors import InvalidRequestError, NotFoundError
from bizbooks.domain.derived import round_money
from bizbooks.web.pagination import PageInfo

_M = TypeVar("_M")

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def money(value: Any) -> Decimal:
    """Coerce an aggregate result (``None``, float or Decimal) to money."""

    if value is None:
        return round_money(Decimal("0"))
    return round_money(value)


def optional_money(value: Any) -> Decimal | None:
    return None if value is None else round_money(value)


def as_date(value: Any) -> dt.date | None:
    """Normalise a MIN/MAX(date) result, which SQLite may return as text."""

    if value is None or isinstance(value, dt.date):
        return value
    return dt.date.fromisoformat(str(value)[:10])


class UserScopedService:
    """Base class holding the session and the owning user id."""

    def __init__(self, session: Session, user_id: int) -> None:
        self._session = session
        self._user_id = user_id

    @property
    def user_id(self) -> int:
        return self._user_id

    def _get_owned(
        self,
        model: type[_M],
        record_id: int,
        *,
        message: str,
        for_update: bool = False,
    ) -> _M:
        """Load ``model`` by id for the current user or raise ``NotFoundError``."""

        stmt = select(model).where(model.id == record_id, model.user_id == self._user_id)
        if for_update:
            stmt = stmt.with_for_update()
        record = self._session.execute(stmt).scalar_one_or_none()
        if record is None:
            raise NotFoundError(message)
        return record

    def _paginate(self, stmt: Select, *, page: int, limit: int) -> tuple[list[Any], PageInfo]:
        """Run ``stmt`` for one page and return the rows with page metadata."""

        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = self._session.execute(count_stmt).scalar_one()
        info = PageInfo(page=page, limit=limit, total_records=int(total))
        rows = self._session.execute(stmt.limit(limit).offset(info.offset)).all()
        return rows, info

    @staticmethod
    def _apply_changes(record: Any, changes: dict[str, Any]) -> None:
        if not changes:
            raise InvalidRequestError("No valid fields to update")
        for field, value in changes.items():
            setattr(record, field, value)


__all__ = [
    "MONTH_ABBREVIATIONS",
    "UserScopedService",
    "as_date",
    "money",
    "optional_money",
]
