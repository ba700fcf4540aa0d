"""Schemas for user categories."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from bizbooks.models import CategoryType

from .common import RecordModel, RequestModel


class CategoryCreate(RequestModel):
    name: str = Field(min_length=1, max_length=50)
    type: CategoryType
    color: str = Field("#3B82F6", pattern=r"^#[0-9A-Fa-f]{6}$")
    icon: str = Field("circle", max_length=50)


class CategoryUpdate(RequestModel):
    name: str | None = Field(None, min_length=1, max_length=50)
    color: str | None = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")
    icon: str | None = Field(None, max_length=50)

    @field_validator("name", "color", "icon")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class CategoryListQuery(BaseModel):
    type: CategoryType | None = None


class CategoryRecord(RecordModel):
    id: int
    name: str
    type: CategoryType
    color: str
    icon: str
    created_at: datetime | None = None


__all__ = ["CategoryCreate", "CategoryListQuery", "CategoryRecord", "CategoryUpdate"]
