"""FastAPI application instance and startup hooks."""
from __future__ import annotations

import time
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from bizbooks.core.config import Settings, get_settings
from bizbooks.core.errors import BookkeepingError
from bizbooks.core.log import get_logger, init_logging
from bizbooks.core.security import SecurityProvider
from bizbooks.db import build_sessionmaker, create_sync_engine
from bizbooks.db.schema import init_database
from bizbooks.middleware import AuthMiddleware, RequestLoggingMiddleware
from bizbooks.routers import API_ROUTERS
from bizbooks.web import fail

LOGGER = get_logger(__name__)

API_VERSION = "1.0.0"
ENDPOINTS = (
    "/api/auth",
    "/api/income",
    "/api/expenses",
    "/api/purchases",
    "/api/sales",
    "/api/charity",
    "/api/accounts",
    "/api/loans",
    "/api/categories",
    "/api/dashboard",
)

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def _validation_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in _LOCATION_PREFIXES]
        errors.append({"field": ".".join(location) or "body", "message": error.get("msg", "")})
    return errors


def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(BookkeepingError)
    async def bookkeeping_error(request: Request, exc: BookkeepingError) -> JSONResponse:
        return fail(exc.message, status_code=exc.status_code, data=exc.data)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return fail("Validation failed", status_code=400, errors=_validation_errors(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            return fail("Endpoint not found", status_code=404, path=request.url.path)
        return fail(str(exc.detail), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        LOGGER.exception("Unhandled error on %s %s", request.method, request.url.path)
        extra = {}
        if not settings.server.is_production:
            extra["stack"] = "".join(traceback.format_exception(exc))
        return fail("Internal server error", status_code=500, **extra)


def create_app(
    settings: Settings | None = None,
    session_factory: sessionmaker | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``session_factory`` lets callers (tests, scripts) supply their own pool;
    otherwise one is built from ``settings.database`` and disposed on shutdown.
    """

    settings = settings or get_settings()
    init_logging(level=settings.server.log_level, log_dir=settings.server.log_dir)

    owns_engine = session_factory is None
    if session_factory is None:
        session_factory = build_sessionmaker(create_sync_engine(settings.database.sqlalchemy_url))
    engine = session_factory.kw["bind"]

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.database.auto_create:
            init_database(engine)
        LOGGER.info("Bookkeeping API ready (%s)", settings.server.environment)
        yield
        if owns_engine:
            engine.dispose()
            LOGGER.info("Database pool disposed")

    app = FastAPI(title="Business Bookkeeping API", version=API_VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.security_provider = SecurityProvider(settings.auth)
    app.state.started_at = time.monotonic()

    app.add_middleware(AuthMiddleware, security_provider=app.state.security_provider)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.server.cors_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app, settings)
    for router in API_ROUTERS:
        app.include_router(router)

    @app.get("/health", include_in_schema=False)
    def health() -> JSONResponse:
        return JSONResponse(
            {
                "status": "OK",
                "timestamp": datetime.now(tz=timezone.utc).isoformat(),
                "uptime": round(time.monotonic() - app.state.started_at, 3),
                "environment": settings.server.environment,
            }
        )

    @app.get("/", include_in_schema=False)
    def root() -> JSONResponse:
        return JSONResponse(
            {
                "message": "My Business Management System API",
                "version": API_VERSION,
                "endpoints": list(ENDPOINTS),
            }
        )

    LOGGER.info("FastAPI application initialised")
    return app


__all__ = ["create_app"]
