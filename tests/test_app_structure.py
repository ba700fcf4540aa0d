import pytest
from fastapi import FastAPI
from pydantic import ValidationError

from bizbooks.core.config import Settings, get_settings
from bizbooks.main import create_app
from bizbooks.schemas.common import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, DateRangeQuery


def test_create_app_registers_api_routers(settings: Settings, session_factory) -> None:
    app = create_app(settings, session_factory=session_factory)
    assert isinstance(app, FastAPI)
    paths = set(app.openapi()["paths"]) | {getattr(route, "path", None) for route in app.routes}
    for path in (
        "/api/auth/login",
        "/api/income",
        "/api/expenses/{record_id}",
        "/api/purchases/stats/summary",
        "/api/sales/available-purchases",
        "/api/charity/payment",
        "/api/accounts/transfer",
        "/api/loans/{loan_id}/payment",
        "/api/categories/usage/summary",
        "/api/dashboard/analytics",
        "/health",
    ):
        assert path in paths


def test_get_settings_uses_default_configuration(monkeypatch) -> None:
    for name in (
        "DB_HOST",
        "DB_PORT",
        "DB_USER",
        "DB_PASSWORD",
        "DB_NAME",
        "DATABASE_URL",
        "SQLALCHEMY_ECHO",
        "JWT_EXPIRES_MINUTES",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()

    try:
        settings = get_settings()
    finally:
        get_settings.cache_clear()

    assert settings.database.host == "localhost"
    assert settings.database.port == 3306
    assert settings.database.name == "my_business"
    assert settings.database.sqlalchemy_url.startswith("mysql+pymysql://root@localhost:3306/")
    assert settings.auth.access_token_expire_minutes == 7 * 24 * 60
    assert settings.sqlalchemy_echo is False


def test_list_queries_bound_the_page_size() -> None:
    assert DateRangeQuery().limit == DEFAULT_PAGE_SIZE
    assert DateRangeQuery(limit=MAX_PAGE_SIZE).limit == MAX_PAGE_SIZE
    with pytest.raises(ValidationError):
        DateRangeQuery(limit=MAX_PAGE_SIZE + 1)
