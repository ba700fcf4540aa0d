"""Shared fixtures: an in-memory SQLite database, the app and a registered user."""
from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bizbooks.core.config import AuthSettings, DatabaseSettings, ServerSettings, Settings
from bizbooks.core.security import SecurityProvider
from bizbooks.db import build_sessionmaker, create_sync_engine
from bizbooks.db.schema import init_database
from bizbooks.main import create_app
from bizbooks.schemas.auth import RegisterRequest
from bizbooks.services import AuthService


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        database=DatabaseSettings(
            driver="sqlite",
            host="",
            port=0,
            user="",
            password="",
            name="",
            auto_create=False,
            url_override="sqlite://",
        ),
        auth=AuthSettings(
            secret_key="test-secret",
            algorithm="HS256",
            access_token_expire_minutes=60,
        ),
        server=ServerSettings(
            host="127.0.0.1",
            port=5000,
            environment="test",
            cors_origin="http://localhost:5173",
            log_level="WARNING",
        ),
    )


@pytest.fixture()
def session_factory() -> Iterator[sessionmaker]:
    """Provide a sessionmaker over one shared in-memory connection per test."""

    engine = create_sync_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    init_database(engine)
    yield build_sessionmaker(engine)
    engine.dispose()


@pytest.fixture()
def session(session_factory: sessionmaker) -> Iterator[Session]:
    with session_factory() as session:
        yield session


@pytest.fixture()
def security(settings: Settings) -> SecurityProvider:
    return SecurityProvider(settings.auth)


@pytest.fixture()
def user_id(session: Session, security: SecurityProvider) -> int:
    """Register a user (with default categories and cash account) and return its id."""

    result = AuthService(session, security).register(
        RegisterRequest(
            username="owner",
            email="owner@example.com",
            password="secret123",
            full_name="Shop Owner",
            business_name="Corner Shop",
        )
    )
    return result.user.id


@pytest.fixture()
def client(settings: Settings, session_factory: sessionmaker) -> Iterator[TestClient]:
    app = create_app(settings, session_factory=session_factory)
    with TestClient(app) as test_client:
        yield test_client


def register(client: TestClient, username: str = "alice") -> dict[str, str]:
    """Register ``username`` through the API and return bearer auth headers."""

    response = client.post(
        "/api/auth/register",
        json={
            "username": username,
            "email": f"{username}@example.com",
            "password": "secret123",
            "full_name": f"{username.title()} Example",
        },
    )
    assert response.status_code == 201, response.text
    token = response.json()["data"]["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def auth_headers(client: TestClient) -> dict[str, str]:
    return register(client)


@pytest.fixture()
def register_user(client: TestClient):
    """Return a helper registering extra users on the test client."""

    return lambda username: register(client, username)
