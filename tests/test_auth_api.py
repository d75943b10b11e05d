"""
Tests for the authentication endpoints.

Run with: python -m pytest tests/test_auth_api.py
"""

from unittest.mock import AsyncMock, patch

from conftest import TEST_PIN


def test_login_success(client):
    response = client.post("/api/auth", json={"pin": TEST_PIN})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert len(data["token"]) == 64
    assert data["expires_in"] == 3600


def test_login_with_form_body(client):
    response = client.post("/api/auth", data={"pin": TEST_PIN})

    assert response.status_code == 200
    assert response.json()["success"] is True


def test_login_missing_pin(client):
    for payload in [{}, {"pin": ""}, {"pin": "   "}]:
        response = client.post("/api/auth", json=payload)
        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "PIN is required"}


def test_login_without_body(client):
    response = client.post("/api/auth")

    assert response.status_code == 400


def test_login_wrong_pin_is_throttled(client):
    """A wrong PIN sleeps for the configured delay before answering 401."""
    with patch("server.auth.throttle_failed_login", new_callable=AsyncMock) as throttle:
        response = client.post("/api/auth", json={"pin": "0000"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid PIN"}
    throttle.assert_awaited_once()


def test_login_storage_failure(client):
    with patch("server.auth.create_session", return_value=None):
        response = client.post("/api/auth", json={"pin": TEST_PIN})

    assert response.status_code == 500
    assert response.json()["success"] is False


def test_check_auth_without_token(client):
    response = client.get("/api/auth")

    assert response.status_code == 200
    assert response.json()["authenticated"] is False


def test_check_auth_with_token(client, auth_headers):
    response = client.get("/api/auth", headers=auth_headers)

    assert response.json()["authenticated"] is True


def test_check_auth_with_unknown_token(client):
    response = client.get("/api/auth", headers={"Authorization": "Bearer " + "0" * 64})

    assert response.status_code == 200
    assert response.json()["authenticated"] is False


def test_token_sources(client, auth_headers):
    token = auth_headers["Authorization"].split(" ", 1)[1]

    assert client.get("/api/auth", headers={"X-Session-Token": token}).json()["authenticated"] is True
    assert client.get("/api/auth", params={"session_token": token}).json()["authenticated"] is True
    assert client.get("/api/auth", headers={"Authorization": f"bearer {token}"}).json()["authenticated"] is True


def test_authorization_header_takes_precedence(client, auth_headers):
    token = auth_headers["Authorization"].split(" ", 1)[1]

    response = client.get(
        "/api/auth",
        headers={"Authorization": f"Bearer {token}", "X-Session-Token": "bogus"},
    )
    assert response.json()["authenticated"] is True

    response = client.get(
        "/api/auth",
        headers={"Authorization": "Bearer bogus", "X-Session-Token": token},
    )
    assert response.json()["authenticated"] is False


def test_logout_is_idempotent(client, auth_headers):
    first = client.delete("/api/auth", headers=auth_headers)
    second = client.delete("/api/auth", headers=auth_headers)
    anonymous = client.delete("/api/auth")

    for response in (first, second, anonymous):
        assert response.status_code == 200
        assert response.json()["success"] is True

    assert client.get("/api/auth", headers=auth_headers).json()["authenticated"] is False


def test_cors_preflight(client):
    response = client.options(
        "/api/markers",
        headers={
            "Origin": "http://example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Authorization",
        },
    )

    assert response.status_code == 200
    assert "access-control-allow-origin" in response.headers
