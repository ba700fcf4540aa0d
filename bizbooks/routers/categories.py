"""Category routes."""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from bizbooks.core.security import AuthenticatedUser, get_authenticated_user
from bizbooks.schemas.categories import (
    CategoryCreate,
    CategoryListQuery,
    CategoryRecord,
    CategoryUpdate,
)
from bizbooks.services import CategoryService
from bizbooks.web import get_db_session, parse_record_id, respond

router = APIRouter(prefix="/api/categories", tags=["categories"])


def get_category_service(
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_authenticated_user),
) -> CategoryService:
    return CategoryService(session, user.user_id)


def _dump(category) -> dict:
    return CategoryRecord.model_validate(category).model_dump()


@router.get("")
def list_categories(
    query: Annotated[CategoryListQuery, Query()],
    service: CategoryService = Depends(get_category_service),
) -> JSONResponse:
    categories, grouped = service.list_categories(query)
    return respond(
        {
            "categories": [_dump(category) for category in categories],
            "grouped": {
                kind: [_dump(category) for category in members]
                for kind, members in grouped.items()
            },
        }
    )


@router.get("/usage/summary")
def usage_summary(service: CategoryService = Depends(get_category_service)) -> JSONResponse:
    return respond({"categories": service.usage_summary()})


@router.get("/{category_id}/stats")
def category_stats(
    category_id: str,
    service: CategoryService = Depends(get_category_service),
) -> JSONResponse:
    stats = service.stats(parse_record_id(category_id, "category"))
    stats["category"] = _dump(stats["category"])
    return respond(stats)


@router.get("/{category_id}")
def get_category(category_id: str, service: CategoryService = Depends(get_category_service)) -> JSONResponse:
    return respond({"category": _dump(service.get(parse_record_id(category_id, "category")))})


@router.post("")
def create_category(
    payload: CategoryCreate,
    service: CategoryService = Depends(get_category_service),
) -> JSONResponse:
    category = service.create(payload)
    return respond(
        {"category": _dump(category)}, message="Category created successfully", status_code=201
    )


@router.put("/{category_id}")
def update_category(
    category_id: str,
    payload: CategoryUpdate,
    service: CategoryService = Depends(get_category_service),
) -> JSONResponse:
    category = service.update(parse_record_id(category_id, "category"), payload)
    return respond({"category": _dump(category)}, message="Category updated successfully")


@router.delete("/{category_id}")
def delete_category(
    category_id: str,
    service: CategoryService = Depends(get_category_service),
) -> JSONResponse:
    service.delete(parse_record_id(category_id, "category"))
    return respond(message="Category deleted successfully")


__all__ = ["router"]
