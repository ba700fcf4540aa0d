"""Authentication routes: registration, login, profile and token refresh."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from bizbooks.core.log import get_logger
from bizbooks.core.security import (
    AuthenticatedUser,
    SecurityProvider,
    get_authenticated_user,
    get_security,
)
from bizbooks.schemas.auth import LoginRequest, ProfileUpdate, RegisterRequest, UserRecord
from bizbooks.services import AuthService
from bizbooks.web import get_db_session, respond

LOGGER = get_logger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])


def get_auth_service(
    session: Session = Depends(get_db_session),
    security: SecurityProvider = Depends(get_security),
) -> AuthService:
    return AuthService(session, security)


@router.post("/register")
def register(payload: RegisterRequest, service: AuthService = Depends(get_auth_service)) -> JSONResponse:
    result = service.register(payload)
    return respond(result.as_dict(), message="User registered successfully", status_code=201)


@router.post("/login")
def login(payload: LoginRequest, service: AuthService = Depends(get_auth_service)) -> JSONResponse:
    result = service.login(payload)
    LOGGER.debug("User authenticated", extra={"username": result.user.username})
    return respond(result.as_dict(), message="Login successful")


@router.get("/profile")
def get_profile(
    user: AuthenticatedUser = Depends(get_authenticated_user),
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    profile = service.profile(user.user_id)
    return respond({"user": UserRecord.model_validate(profile).model_dump()})


@router.put("/profile")
def update_profile(
    payload: ProfileUpdate,
    user: AuthenticatedUser = Depends(get_authenticated_user),
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    profile = service.update_profile(user.user_id, payload)
    return respond(
        {"user": UserRecord.model_validate(profile).model_dump()},
        message="Profile updated successfully",
    )


@router.post("/refresh")
def refresh_token(
    user: AuthenticatedUser = Depends(get_authenticated_user),
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    return respond({"token": service.refresh(user)}, message="Token refreshed successfully")


__all__ = ["router"]
