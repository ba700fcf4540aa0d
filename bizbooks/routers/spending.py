"""Expense and purchase routes.

Both ledgers expose the same endpoints; only the prefix, the data keys and
the service class differ.
"""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from bizbooks.core.security import AuthenticatedUser, get_authenticated_user
from bizbooks.schemas.spending import (
    SpendingCreate,
    SpendingListQuery,
    SpendingRecordOut,
    SpendingUpdate,
)
from bizbooks.services import ExpenseService, PurchaseService, SpendingService
from bizbooks.web import get_db_session, parse_record_id, respond


def _build_router(service_cls: type[SpendingService], prefix: str) -> APIRouter:
    singular = service_cls.noun
    plural = service_cls.reference_table
    label = service_cls.label
    router = APIRouter(prefix=prefix, tags=[plural])

    def get_service(
        session: Session = Depends(get_db_session),
        user: AuthenticatedUser = Depends(get_authenticated_user),
    ) -> SpendingService:
        return service_cls(session, user.user_id)

    def dump(record) -> dict:
        return SpendingRecordOut.model_validate(record).model_dump()

    @router.get("")
    def list_records(
        query: Annotated[SpendingListQuery, Query()],
        service: SpendingService = Depends(get_service),
    ) -> JSONResponse:
        records, page = service.list_records(query)
        return respond({plural: [dump(record) for record in records], "pagination": page.as_dict()})

    @router.get("/stats/summary")
    def stats(service: SpendingService = Depends(get_service)) -> JSONResponse:
        return respond(service.stats())

    @router.get("/{record_id}")
    def get_record(record_id: str, service: SpendingService = Depends(get_service)) -> JSONResponse:
        record = service.get(parse_record_id(record_id, singular))
        return respond({singular: dump(record)})

    @router.post("")
    def create_record(
        payload: SpendingCreate,
        service: SpendingService = Depends(get_service),
    ) -> JSONResponse:
        record = service.create(payload)
        return respond(
            {singular: dump(record)},
            message=f"{label} record created successfully",
            status_code=201,
        )

    @router.put("/{record_id}")
    def update_record(
        record_id: str,
        payload: SpendingUpdate,
        service: SpendingService = Depends(get_service),
    ) -> JSONResponse:
        record = service.update(parse_record_id(record_id, singular), payload)
        return respond({singular: dump(record)}, message=f"{label} record updated successfully")

    @router.delete("/{record_id}")
    def delete_record(record_id: str, service: SpendingService = Depends(get_service)) -> JSONResponse:
        service.delete(parse_record_id(record_id, singular))
        return respond(message=f"{label} record deleted successfully")

    return router


expenses_router = _build_router(ExpenseService, "/api/expenses")
purchases_router = _build_router(PurchaseService, "/api/purchases")

__all__ = ["expenses_router", "purchases_router"]
