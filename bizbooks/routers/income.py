"""Income routes."""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from bizbooks.core.security import AuthenticatedUser, get_authenticated_user
from bizbooks.schemas.income import IncomeCreate, IncomeListQuery, IncomeRecord, IncomeUpdate
from bizbooks.services import IncomeService
from bizbooks.web import get_db_session, parse_record_id, respond

router = APIRouter(prefix="/api/income", tags=["income"])


def get_income_service(
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_authenticated_user),
) -> IncomeService:
    return IncomeService(session, user.user_id)


@router.get("")
def list_income(
    query: Annotated[IncomeListQuery, Query()],
    service: IncomeService = Depends(get_income_service),
) -> JSONResponse:
    records, page = service.list_records(query)
    return respond(
        {
            "income": [IncomeRecord.model_validate(record).model_dump() for record in records],
            "pagination": page.as_dict(),
        }
    )


@router.get("/stats/summary")
def income_stats(service: IncomeService = Depends(get_income_service)) -> JSONResponse:
    return respond(service.stats())


@router.get("/{income_id}")
def get_income(income_id: str, service: IncomeService = Depends(get_income_service)) -> JSONResponse:
    record = service.get(parse_record_id(income_id, "income"))
    return respond({"income": IncomeRecord.model_validate(record).model_dump()})


@router.post("")
def create_income(
    payload: IncomeCreate,
    service: IncomeService = Depends(get_income_service),
) -> JSONResponse:
    created = service.create(payload)
    return respond(
        {
            "income": IncomeRecord.model_validate(created.income).model_dump(),
            "charity_created": {
                "amount_required": created.charity.amount_required,
                "status": created.charity.status.value,
            },
        },
        message="Income record created successfully",
        status_code=201,
    )


@router.put("/{income_id}")
def update_income(
    income_id: str,
    payload: IncomeUpdate,
    service: IncomeService = Depends(get_income_service),
) -> JSONResponse:
    record = service.update(parse_record_id(income_id, "income"), payload)
    return respond(
        {"income": IncomeRecord.model_validate(record).model_dump()},
        message="Income record updated successfully",
    )


@router.delete("/{income_id}")
def delete_income(income_id: str, service: IncomeService = Depends(get_income_service)) -> JSONResponse:
    service.delete(parse_record_id(income_id, "income"))
    return respond(message="Income record deleted successfully")


__all__ = ["router"]
