"""Cash and bank accounts, including inter-account transfers."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from bizbooks.core.errors import BusinessRuleError, ConflictError, NotFoundError
from bizbooks.core.log import get_logger
from bizbooks.db import transaction
from bizbooks.domain.derived import round_money
from bizbooks.models import Account, TransactionType
from bizbooks.schemas.accounts import AccountCreate, AccountUpdate, TransferCreate

from .audit import AuditTrail
from .base import UserScopedService

LOGGER = get_logger(__name__)

NOT_FOUND = "Account not found"
DUPLICATE_NAME = "Account name already exists"


@dataclass(frozen=True)
class Transfer:
    """A completed transfer with both accounts as they stand afterwards."""

    from_account: Account
    to_account: Account
    amount: Decimal
    description: str
    date: dt.date

    def as_dict(self) -> dict[str, object]:
        return {
            "from_account": _summary(self.from_account),
            "to_account": _summary(self.to_account),
            "amount": self.amount,
            "description": self.description,
            "date": self.date,
        }


def _summary(account: Account) -> dict[str, object]:
    return {"id": account.id, "account_name": account.account_name, "balance": account.balance}


class AccountService(UserScopedService):
    def list_accounts(self) -> tuple[list[Account], dict[str, Decimal]]:
        """Return every account plus balance totals per type and overall."""

        accounts = list(
            self._session.execute(
                select(Account)
                .where(Account.user_id == self._user_id)
                .order_by(Account.account_type, Account.account_name)
            ).scalars()
        )
        totals: dict[str, Decimal] = {}
        for account in accounts:
            key = account.account_type.value
            totals[key] = round_money(totals.get(key, Decimal("0")) + account.balance)
        totals["grand_total"] = round_money(sum(totals.values(), Decimal("0")))
        return accounts, totals

    def get(self, account_id: int) -> Account:
        return self._get_owned(Account, account_id, message=NOT_FOUND)

    def _name_taken(self, name: str, *, exclude_id: int | None = None) -> bool:
        stmt = select(Account.id).where(
            Account.user_id == self._user_id, Account.account_name == name
        )
        if exclude_id is not None:
            stmt = stmt.where(Account.id != exclude_id)
        return self._session.execute(stmt).first() is not None

    def create(self, payload: AccountCreate) -> Account:
        with transaction(self._session):
            if self._name_taken(payload.account_name):
                raise ConflictError(DUPLICATE_NAME)
            account = Account(
                user_id=self._user_id,
                account_type=payload.account_type,
                account_name=payload.account_name,
                balance=round_money(payload.balance),
                bank_name=payload.bank_name,
                account_number=payload.account_number,
            )
            self._session.add(account)
            try:
                self._session.flush()
            except IntegrityError as exc:
                raise ConflictError(DUPLICATE_NAME) from exc
        LOGGER.info("Created %s account #%s", account.account_type.value, account.id)
        return account

    def update(self, account_id: int, payload: AccountUpdate) -> Account:
        changes = payload.provided_fields()
        if "balance" in changes:
            changes["balance"] = round_money(changes["balance"])
        with transaction(self._session):
            account = self._get_owned(Account, account_id, message=NOT_FOUND, for_update=True)
            name = changes.get("account_name")
            if name is not None and self._name_taken(name, exclude_id=account.id):
                raise ConflictError(DUPLICATE_NAME)
            self._apply_changes(account, changes)
            try:
                self._session.flush()
            except IntegrityError as exc:
                raise ConflictError(DUPLICATE_NAME) from exc
        self._session.refresh(account)
        return account

    def delete(self, account_id: int) -> None:
        with transaction(self._session):
            account = self._get_owned(Account, account_id, message=NOT_FOUND, for_update=True)
            if account.balance != 0:
                raise BusinessRuleError("Cannot delete account with non-zero balance")
            AuditTrail(self._session, self._user_id).remove_for_account(account.id)
            self._session.delete(account)
        LOGGER.info("Deleted account #%s for user %s", account_id, self._user_id)

    def transfer(self, payload: TransferCreate) -> Transfer:
        """Move money between two owned accounts.

        Both rows are locked in id order so opposing transfers cannot deadlock.
        """

        if payload.from_account_id == payload.to_account_id:
            raise BusinessRuleError("Cannot transfer to the same account")

        amount = round_money(payload.amount)
        with transaction(self._session):
            accounts = {
                account.id: account
                for account in self._session.execute(
                    select(Account)
                    .where(
                        Account.user_id == self._user_id,
                        Account.id.in_([payload.from_account_id, payload.to_account_id]),
                    )
                    .order_by(Account.id)
                    .with_for_update()
                ).scalars()
            }
            if len(accounts) != 2:
                raise NotFoundError("One or both accounts not found")

            source = accounts[payload.from_account_id]
            destination = accounts[payload.to_account_id]
            if source.balance < amount:
                raise BusinessRuleError("Insufficient balance in source account")

            source.balance = round_money(source.balance - amount)
            destination.balance = round_money(destination.balance + amount)
            self._session.flush()

            description = (
                payload.description
                or f"Transfer from {source.account_name} to {destination.account_name}"
            )
            audit = AuditTrail(self._session, self._user_id)
            audit.record(
                TransactionType.TRANSFER,
                -amount,
                payload.date,
                description=f"{description} (Debit)",
                account_id=source.id,
            )
            audit.record(
                TransactionType.TRANSFER,
                amount,
                payload.date,
                description=f"{description} (Credit)",
                account_id=destination.id,
            )
        LOGGER.info(
            "Transferred %s from account #%s to #%s", amount, source.id, destination.id
        )
        return Transfer(
            from_account=source,
            to_account=destination,
            amount=amount,
            description=description,
            date=payload.date,
        )


__all__ = ["AccountService", "Transfer"]
