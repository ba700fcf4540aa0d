"""Charity routes: obligations, manual entries and payments."""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from bizbooks.core.security import AuthenticatedUser, get_authenticated_user
from bizbooks.schemas.charity import (
    CharityCreate,
    CharityListQuery,
    CharityPaymentCreate,
    CharityRecord,
    CharityUpdate,
)
from bizbooks.services import CharityService
from bizbooks.web import get_db_session, parse_record_id, respond

router = APIRouter(prefix="/api/charity", tags=["charity"])


def get_charity_service(
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_authenticated_user),
) -> CharityService:
    return CharityService(session, user.user_id)


def _dump(row) -> dict:
    return CharityRecord.from_row(*row).model_dump()


@router.get("")
def list_charity(
    query: Annotated[CharityListQuery, Query()],
    service: CharityService = Depends(get_charity_service),
) -> JSONResponse:
    rows, page = service.list_records(query)
    return respond({"charity": [_dump(row) for row in rows], "pagination": page.as_dict()})


@router.get("/stats/summary")
def charity_stats(service: CharityService = Depends(get_charity_service)) -> JSONResponse:
    return respond(service.stats())


@router.post("/payment")
def record_payment(
    payload: CharityPaymentCreate,
    service: CharityService = Depends(get_charity_service),
) -> JSONResponse:
    row = service.record_payment(payload)
    return respond(
        {
            "charity": _dump(row),
            "payment": {
                "amount": payload.payment_amount,
                "date": payload.payment_date,
                "recipient": payload.recipient,
                "description": payload.description,
            },
        },
        message="Charity payment recorded successfully",
    )


@router.get("/{charity_id}")
def get_charity(charity_id: str, service: CharityService = Depends(get_charity_service)) -> JSONResponse:
    return respond({"charity": _dump(service.get(parse_record_id(charity_id, "charity")))})


@router.post("")
def create_charity(
    payload: CharityCreate,
    service: CharityService = Depends(get_charity_service),
) -> JSONResponse:
    charity = service.create_manual(payload)
    return respond(
        {"charity": CharityRecord.from_row(charity).model_dump()},
        message="Manual charity record created successfully",
        status_code=201,
    )


@router.put("/{charity_id}")
def update_charity(
    charity_id: str,
    payload: CharityUpdate,
    service: CharityService = Depends(get_charity_service),
) -> JSONResponse:
    row = service.update(parse_record_id(charity_id, "charity"), payload)
    return respond({"charity": _dump(row)}, message="Charity record updated successfully")


@router.delete("/{charity_id}")
def delete_charity(charity_id: str, service: CharityService = Depends(get_charity_service)) -> JSONResponse:
    service.delete(parse_record_id(charity_id, "charity"))
    return respond(message="Charity record deleted successfully")


__all__ = ["router"]
