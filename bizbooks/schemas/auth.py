"""Schemas for registration, login and profile management."""
from __future__ import annotations

from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from .common import RecordModel, RequestModel


def _normalize_email(value: str | None) -> str | None:
    if value is None:
        return None
    if len(value) > 100:
        raise ValueError("Email cannot exceed 100 characters")
    return value.lower()


class RegisterRequest(RequestModel):
    username: str = Field(min_length=3, max_length=50, pattern=r"^[a-zA-Z0-9_]+$")
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    full_name: str = Field(min_length=2, max_length=100)
    business_name: str | None = Field(None, max_length=150)

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return _normalize_email(value)


class LoginRequest(RequestModel):
    login: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1)


class ProfileUpdate(RequestModel):
    full_name: str | None = Field(None, min_length=2, max_length=100)
    email: EmailStr | None = None
    business_name: str | None = Field(None, max_length=150)

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str | None) -> str | None:
        return _normalize_email(value)


class UserRecord(RecordModel):
    id: int
    username: str
    email: str
    full_name: str
    business_name: str | None = None
    created_at: datetime | None = None


__all__ = ["LoginRequest", "ProfileUpdate", "RegisterRequest", "UserRecord"]
