"""Loan routes."""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from bizbooks.core.security import AuthenticatedUser, get_authenticated_user
from bizbooks.schemas.loans import (
    LoanCreate,
    LoanListQuery,
    LoanPaymentCreate,
    LoanRecord,
    LoanUpdate,
)
from bizbooks.services import LoanService
from bizbooks.web import get_db_session, parse_record_id, respond

router = APIRouter(prefix="/api/loans", tags=["loans"])


def get_loan_service(
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_authenticated_user),
) -> LoanService:
    return LoanService(session, user.user_id)


def _dump(loan) -> dict:
    return LoanRecord.model_validate(loan).model_dump()


@router.get("")
def list_loans(
    query: Annotated[LoanListQuery, Query()],
    service: LoanService = Depends(get_loan_service),
) -> JSONResponse:
    loans, totals = service.list_loans(query)
    return respond({"loans": [_dump(loan) for loan in loans], "totals": totals})


@router.get("/stats/summary")
def loan_stats(service: LoanService = Depends(get_loan_service)) -> JSONResponse:
    return respond(service.stats())


@router.get("/{loan_id}")
def get_loan(loan_id: str, service: LoanService = Depends(get_loan_service)) -> JSONResponse:
    return respond({"loan": _dump(service.get(parse_record_id(loan_id, "loan")))})


@router.post("")
def create_loan(payload: LoanCreate, service: LoanService = Depends(get_loan_service)) -> JSONResponse:
    loan = service.create(payload)
    return respond({"loan": _dump(loan)}, message="Loan record created successfully", status_code=201)


@router.put("/{loan_id}")
def update_loan(
    loan_id: str,
    payload: LoanUpdate,
    service: LoanService = Depends(get_loan_service),
) -> JSONResponse:
    loan = service.update(parse_record_id(loan_id, "loan"), payload)
    return respond({"loan": _dump(loan)}, message="Loan updated successfully")


@router.post("/{loan_id}/payment")
def record_payment(
    loan_id: str,
    payload: LoanPaymentCreate,
    service: LoanService = Depends(get_loan_service),
) -> JSONResponse:
    payment = service.record_payment(parse_record_id(loan_id, "loan"), payload)
    return respond(
        {"loan": _dump(payment.loan), "payment": payment.as_dict()},
        message="Loan payment recorded successfully",
    )


@router.delete("/{loan_id}")
def delete_loan(loan_id: str, service: LoanService = Depends(get_loan_service)) -> JSONResponse:
    service.delete(parse_record_id(loan_id, "loan"))
    return respond(message="Loan record deleted successfully")


__all__ = ["router"]
