"""Loans and loan repayments."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from sqlalchemy import case, func, select

from bizbooks.core.errors import BusinessRuleError
from bizbooks.core.log import get_logger
from bizbooks.db import transaction
from bizbooks.domain import derived
from bizbooks.models import Loan, LoanStatus, Transaction, TransactionType
from bizbooks.schemas.loans import LoanCreate, LoanListQuery, LoanPaymentCreate, LoanUpdate

from .audit import AuditTrail
from .base import UserScopedService, as_date, money, optional_money

LOGGER = get_logger(__name__)

REFERENCE_TABLE = "loans"
NOT_FOUND = "Loan not found"


@dataclass(frozen=True)
class LoanPayment:
    loan: Loan
    amount: Decimal
    date: dt.date
    description: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "amount": self.amount,
            "date": self.date,
            "description": self.description,
            "new_balance": self.loan.current_balance,
            "status": self.loan.status.value,
        }


class LoanService(UserScopedService):
    def list_loans(self, query: LoanListQuery) -> tuple[list[Loan], dict[str, Decimal]]:
        stmt = select(Loan).where(Loan.user_id == self._user_id)
        if query.status:
            stmt = stmt.where(Loan.status == query.status)
        if query.loan_type:
            stmt = stmt.where(Loan.loan_type == query.loan_type)
        loans = list(
            self._session.execute(
                stmt.order_by(Loan.status, Loan.start_date.desc(), Loan.id.desc())
            ).scalars()
        )

        zero = Decimal("0")
        totals = {
            "total_principal": money(sum((loan.principal_amount for loan in loans), zero)),
            "total_current_balance": money(sum((loan.current_balance for loan in loans), zero)),
            "active_balance": money(
                sum(
                    (loan.current_balance for loan in loans if loan.status is LoanStatus.ACTIVE),
                    zero,
                )
            ),
        }
        return loans, totals

    def get(self, loan_id: int) -> Loan:
        return self._get_owned(Loan, loan_id, message=NOT_FOUND)

    def create(self, payload: LoanCreate) -> Loan:
        principal = derived.round_money(payload.principal_amount)
        balance = payload.current_balance
        with transaction(self._session):
            loan = Loan(
                user_id=self._user_id,
                loan_type=payload.loan_type,
                lender_name=payload.lender_name,
                principal_amount=principal,
                current_balance=principal if balance is None else derived.round_money(balance),
                interest_rate=optional_money(payload.interest_rate),
                monthly_payment=optional_money(payload.monthly_payment),
                start_date=payload.start_date,
                due_date=payload.due_date,
                status=LoanStatus.ACTIVE,
            )
            self._session.add(loan)
        LOGGER.info("Created %s loan #%s from %s", loan.loan_type.value, loan.id, loan.lender_name)
        return loan

    def update(self, loan_id: int, payload: LoanUpdate) -> Loan:
        changes = payload.provided_fields()
        for field in ("current_balance", "interest_rate", "monthly_payment"):
            if changes.get(field) is not None:
                changes[field] = derived.round_money(changes[field])
        with transaction(self._session):
            loan = self._get_owned(Loan, loan_id, message=NOT_FOUND, for_update=True)
            self._apply_changes(loan, changes)
        self._session.refresh(loan)
        return loan

    def record_payment(self, loan_id: int, payload: LoanPaymentCreate) -> LoanPayment:
        amount = derived.round_money(payload.payment_amount)
        with transaction(self._session):
            loan = self._get_owned(Loan, loan_id, message=NOT_FOUND, for_update=True)
            if loan.status is not LoanStatus.ACTIVE:
                raise BusinessRuleError("Cannot make payments on inactive loans")
            if amount > loan.current_balance:
                raise BusinessRuleError(
                    f"Payment amount cannot exceed current balance of {loan.current_balance}"
                )
            loan.current_balance = derived.round_money(loan.current_balance - amount)
            loan.status = derived.loan_status_after_payment(loan.current_balance)
            self._session.flush()

            description = payload.description or f"Loan payment to {loan.lender_name}"
            AuditTrail(self._session, self._user_id).record(
                TransactionType.LOAN_PAYMENT,
                amount,
                payload.payment_date,
                description=description,
                reference_table=REFERENCE_TABLE,
                reference_id=loan.id,
            )
        self._session.refresh(loan)
        LOGGER.info("Loan #%s paid %s, balance %s", loan.id, amount, loan.current_balance)
        return LoanPayment(loan=loan, amount=amount, date=payload.payment_date, description=description)

    def delete(self, loan_id: int) -> None:
        with transaction(self._session):
            loan = self._get_owned(Loan, loan_id, message=NOT_FOUND, for_update=True)
            AuditTrail(self._session, self._user_id).remove(REFERENCE_TABLE, loan.id)
            self._session.delete(loan)
        LOGGER.info("Deleted loan #%s for user %s", loan_id, self._user_id)

    def stats(self) -> dict[str, Any]:
        owned = Loan.user_id == self._user_id
        active = Loan.status == LoanStatus.ACTIVE

        totals = self._session.execute(
            select(
                func.count(Loan.id),
                func.sum(Loan.principal_amount),
                func.sum(Loan.current_balance),
                func.sum(case((active, Loan.current_balance), else_=0)),
                func.sum(case((Loan.status == LoanStatus.PAID, 1), else_=0)),
                func.sum(case((active, 1), else_=0)),
                func.avg(case((active, Loan.interest_rate))),
            ).where(owned)
        ).one()

        balance = func.sum(Loan.current_balance)
        by_type = self._session.execute(
            select(Loan.loan_type, func.count(Loan.id), func.sum(Loan.principal_amount), balance)
            .where(owned)
            .group_by(Loan.loan_type)
            .order_by(balance.desc())
        ).all()

        recent = self._session.execute(
            select(
                Transaction.amount,
                Transaction.description,
                Transaction.date,
                Transaction.created_at,
                Loan.lender_name,
                Loan.loan_type,
            )
            .join(Loan, Transaction.reference_id == Loan.id)
            .where(
                Transaction.user_id == self._user_id,
                Transaction.transaction_type == TransactionType.LOAN_PAYMENT,
                Transaction.reference_table == REFERENCE_TABLE,
            )
            .order_by(Transaction.created_at.desc(), Transaction.id.desc())
            .limit(10)
        ).all()

        return {
            "summary": {
                "total_loans": totals[0],
                "total_principal": money(totals[1]),
                "total_current_balance": money(totals[2]),
                "active_balance": money(totals[3]),
                "paid_loans": int(totals[4] or 0),
                "active_loans": int(totals[5] or 0),
                "avg_interest_rate": optional_money(totals[6]),
            },
            "by_type": [
                {
                    "loan_type": row[0].value,
                    "count": row[1],
                    "total_principal": money(row[2]),
                    "total_balance": money(row[3]),
                }
                for row in by_type
            ],
            "recent_payments": [
                {
                    "amount": row[0],
                    "description": row[1],
                    "date": as_date(row[2]),
                    "created_at": row[3],
                    "lender_name": row[4],
                    "loan_type": row[5].value,
                }
                for row in recent
            ],
        }


__all__ = ["LoanPayment", "LoanService"]
