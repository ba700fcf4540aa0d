"""Dashboard report routes."""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from bizbooks.core.security import AuthenticatedUser, get_authenticated_user
from bizbooks.schemas.dashboard import AnalyticsQuery
from bizbooks.services import DashboardService
from bizbooks.web import get_db_session, respond

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def get_dashboard_service(
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_authenticated_user),
) -> DashboardService:
    """Return a new ``DashboardService`` instance for the request lifecycle."""

    return DashboardService(session, user.user_id)


@router.get("/summary")
def dashboard_summary(service: DashboardService = Depends(get_dashboard_service)) -> JSONResponse:
    return respond(service.summary())


@router.get("/analytics")
def dashboard_analytics(
    query: Annotated[AnalyticsQuery, Query()],
    service: DashboardService = Depends(get_dashboard_service),
) -> JSONResponse:
    return respond(service.analytics(query))


@router.get("/metrics")
def dashboard_metrics(service: DashboardService = Depends(get_dashboard_service)) -> JSONResponse:
    return respond(service.metrics())


__all__ = ["router"]
