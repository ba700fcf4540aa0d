"""Audit ledger writer.

Every mutating bookkeeping event leaves one or more rows in ``transactions``
pointing back at the source row through ``reference_table``/``reference_id``.
The writer only stages changes on the caller's session; committing is the
job of the surrounding unit of work.
"""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import delete, update
from sqlalchemy.orm import Session

from bizbooks.core.log import get_logger
from bizbooks.domain.derived import round_money
from bizbooks.models import Transaction, TransactionType

LOGGER = get_logger(__name__)


class AuditTrail:
    """Stage ledger rows for a single user inside the current transaction."""

    def __init__(self, session: Session, user_id: int) -> None:
        self._session = session
        self._user_id = user_id

    def record(
        self,
        transaction_type: TransactionType,
        amount: Decimal,
        entry_date: dt.date,
        *,
        description: str | None = None,
        reference_table: str | None = None,
        reference_id: int | None = None,
        account_id: int | None = None,
    ) -> Transaction:
        entry = Transaction(
            user_id=self._user_id,
            transaction_type=transaction_type,
            reference_table=reference_table,
            reference_id=reference_id,
            amount=round_money(amount),
            description=description,
            account_id=account_id,
            date=entry_date,
        )
        self._session.add(entry)
        self._session.flush()
        LOGGER.debug(
            "Ledger %s %s for %s#%s",
            transaction_type.value,
            entry.amount,
            reference_table,
            reference_id,
        )
        return entry

    def revise(
        self,
        reference_table: str,
        reference_id: int,
        *,
        amount: Decimal | None = None,
        description: str | None = None,
        entry_date: dt.date | None = None,
    ) -> int:
        """Rewrite the ledger rows of a source row after it was edited."""

        values: dict[str, object] = {}
        if amount is not None:
            values["amount"] = round_money(amount)
        if description is not None:
            values["description"] = description
        if entry_date is not None:
            values["date"] = entry_date
        if not values:
            return 0
        result = self._session.execute(
            update(Transaction)
            .where(
                Transaction.user_id == self._user_id,
                Transaction.reference_table == reference_table,
                Transaction.reference_id == reference_id,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def remove(self, reference_table: str, reference_id: int) -> int:
        result = self._session.execute(
            delete(Transaction)
            .where(
                Transaction.user_id == self._user_id,
                Transaction.reference_table == reference_table,
                Transaction.reference_id == reference_id,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def remove_for_account(self, account_id: int) -> int:
        result = self._session.execute(
            delete(Transaction)
            .where(Transaction.user_id == self._user_id, Transaction.account_id == account_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount


__all__ = ["AuditTrail"]
