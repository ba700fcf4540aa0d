"""Tests for authentication and the JSON error envelope."""
from __future__ import annotations

from fastapi.testclient import TestClient


def test_register_login_profile_and_refresh(client: TestClient, auth_headers) -> None:
    login = client.post("/api/auth/login", json={"login": "alice", "password": "secret123"})
    assert login.status_code == 200
    assert login.json()["data"]["user"]["email"] == "alice@example.com"

    profile = client.get("/api/auth/profile", headers=auth_headers)
    assert profile.json()["data"]["user"]["full_name"] == "Alice Example"

    updated = client.put(
        "/api/auth/profile", json={"business_name": "Alice Crafts"}, headers=auth_headers
    )
    assert updated.json()["data"]["user"]["business_name"] == "Alice Crafts"

    refreshed = client.post("/api/auth/refresh", headers=auth_headers)
    assert refreshed.json()["message"] == "Token refreshed successfully"
    assert refreshed.json()["data"]["token"]


def test_wrong_password_is_unauthorized(client: TestClient, auth_headers) -> None:
    response = client.post("/api/auth/login", json={"login": "alice", "password": "nope"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid credentials"}


def test_duplicate_registration_conflicts(client: TestClient, auth_headers) -> None:
    response = client.post(
        "/api/auth/register",
        json={
            "username": "alice",
            "email": "new@example.com",
            "password": "secret123",
            "full_name": "Alice Again",
        },
    )

    assert response.status_code == 409


def test_missing_and_invalid_tokens(client: TestClient) -> None:
    missing = client.get("/api/income")
    assert missing.status_code == 401
    assert missing.json() == {"success": False, "message": "Access token required"}

    invalid = client.get("/api/income", headers={"Authorization": "Bearer not-a-jwt"})
    assert invalid.status_code == 403
    assert invalid.json()["message"] == "Invalid or expired token"


def test_validation_errors_list_each_field(client: TestClient, auth_headers) -> None:
    response = client.post(
        "/api/income",
        json={"amount": -5, "date": "not-a-date"},
        headers=auth_headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert {error["field"] for error in body["errors"]} == {"amount", "date"}


def test_query_parameters_are_validated(client: TestClient, auth_headers) -> None:
    response = client.get("/api/expenses", params={"limit": 1000}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "limit"


def test_malformed_path_id(client: TestClient, auth_headers) -> None:
    response = client.get("/api/loans/abc", headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Invalid loan ID"}


def test_unknown_endpoint(client: TestClient, auth_headers) -> None:
    response = client.get("/api/nothing-here", headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "message": "Endpoint not found",
        "path": "/api/nothing-here",
    }


def test_health_and_root_are_public(client: TestClient) -> None:
    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] == "OK"

    root = client.get("/")
    assert "/api/dashboard" in root.json()["endpoints"]
