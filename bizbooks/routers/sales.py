"""Sale routes."""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from bizbooks.core.security import AuthenticatedUser, get_authenticated_user
from bizbooks.schemas.sales import SaleCreate, SaleListQuery, SaleRecord, SaleUpdate
from bizbooks.schemas.spending import SpendingRecordOut
from bizbooks.services import SaleService
from bizbooks.web import get_db_session, parse_record_id, respond

router = APIRouter(prefix="/api/sales", tags=["sales"])


def get_sale_service(
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_authenticated_user),
) -> SaleService:
    return SaleService(session, user.user_id)


def _dump(sale) -> dict:
    return SaleRecord.model_validate(sale).model_dump()


@router.get("")
def list_sales(
    query: Annotated[SaleListQuery, Query()],
    service: SaleService = Depends(get_sale_service),
) -> JSONResponse:
    sales, page = service.list_records(query)
    return respond({"sales": [_dump(sale) for sale in sales], "pagination": page.as_dict()})


@router.get("/stats/summary")
def sales_stats(service: SaleService = Depends(get_sale_service)) -> JSONResponse:
    return respond(service.stats())


@router.get("/summary")
def sales_summary(service: SaleService = Depends(get_sale_service)) -> JSONResponse:
    return respond(service.stats()["summary"])


@router.get("/available-purchases")
def available_purchases(service: SaleService = Depends(get_sale_service)) -> JSONResponse:
    purchases = service.available_purchases()
    return respond(
        {"purchases": [SpendingRecordOut.model_validate(item).model_dump() for item in purchases]}
    )


@router.get("/{sale_id}")
def get_sale(sale_id: str, service: SaleService = Depends(get_sale_service)) -> JSONResponse:
    return respond({"sale": _dump(service.get(parse_record_id(sale_id, "sale")))})


@router.post("")
def create_sale(payload: SaleCreate, service: SaleService = Depends(get_sale_service)) -> JSONResponse:
    sale = service.create(payload)
    return respond({"sale": _dump(sale)}, message="Sale record created successfully", status_code=201)


@router.put("/{sale_id}")
def update_sale(
    sale_id: str,
    payload: SaleUpdate,
    service: SaleService = Depends(get_sale_service),
) -> JSONResponse:
    sale = service.update(parse_record_id(sale_id, "sale"), payload)
    return respond({"sale": _dump(sale)}, message="Sale record updated successfully")


@router.delete("/{sale_id}")
def delete_sale(sale_id: str, service: SaleService = Depends(get_sale_service)) -> JSONResponse:
    service.delete(parse_record_id(sale_id, "sale"))
    return respond(message="Sale record deleted successfully")


__all__ = ["router"]
