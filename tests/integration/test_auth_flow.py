"""End-to-end session lifecycle through the HTTP API."""

import pytest
from httpx import AsyncClient

from identity.constants import auth_messages

API = "/api/v1/auth"


@pytest.mark.integration
async def test_register_login_refresh_logout(integration_environment):
    client: AsyncClient = integration_environment["client"]
    auth_headers = integration_environment["auth_headers"]

    # Register
    response = await client.post(f"{API}/register", json={"email": "A@X.com", "password": "StrongPass1"})
    assert response.status_code == 201
    registered = response.json()
    assert registered["email"] == "a@x.com"

    # Login with different email casing
    response = await client.post(f"{API}/login", json={"email": "a@X.COM", "password": "StrongPass1"})
    assert response.status_code == 200
    first = response.json()
    assert first["token_type"] == "Bearer"
    assert first["access_token"] and first["refresh_token"]

    # Refresh rotates the refresh token
    response = await client.post(
        f"{API}/refresh",
        json={"refresh_token": first["refresh_token"], "access_token": first["access_token"]},
    )
    assert response.status_code == 200
    second = response.json()
    assert second["refresh_token"] != first["refresh_token"]

    # New access token identifies the same user with the same roles
    response = await client.get(f"{API}/me", headers=auth_headers(second))
    assert response.status_code == 200
    assert response.json() == {"id": registered["id"], "email": "a@x.com", "roles": ["Member"]}

    # Only the successor is an active session
    response = await client.get(f"{API}/sessions", headers=auth_headers(second))
    assert response.status_code == 200
    assert len(response.json()) == 1

    # Replaying the rotated token fails
    response = await client.post(f"{API}/refresh", json={"refresh_token": first["refresh_token"]})
    assert response.status_code == 401
    assert response.json()["detail"] == auth_messages.REFRESH_TOKEN_REVOKED

    # Logout, then the successor is dead too
    response = await client.post(f"{API}/logout", json={"refresh_token": second["refresh_token"]})
    assert response.status_code == 204
    response = await client.post(f"{API}/refresh", json={"refresh_token": second["refresh_token"]})
    assert response.status_code == 401
    assert response.json()["detail"] == auth_messages.REFRESH_TOKEN_REVOKED

    # Logging out twice is harmless
    response = await client.post(f"{API}/logout", json={"refresh_token": second["refresh_token"]})
    assert response.status_code == 204


@pytest.mark.integration
async def test_logout_unknown_token(integration_environment):
    client: AsyncClient = integration_environment["client"]

    response = await client.post(f"{API}/logout", json={"refresh_token": "not-a-token"})

    assert response.status_code == 401
    assert response.json()["detail"] == auth_messages.INVALID_REFRESH_TOKEN


@pytest.mark.integration
async def test_refresh_rejects_foreign_access_token(integration_environment):
    client: AsyncClient = integration_environment["client"]
    await integration_environment["create_user"]("one@x.com")
    await integration_environment["create_user"]("two@x.com")
    one = await integration_environment["login"](client, "one@x.com")
    two = await integration_environment["login"](client, "two@x.com")

    response = await client.post(
        f"{API}/refresh",
        json={"refresh_token": one["refresh_token"], "access_token": two["access_token"]},
    )

    assert response.status_code == 401
    assert response.json()["detail"] == auth_messages.INVALID_REFRESH_TOKEN


@pytest.mark.integration
async def test_google_login_then_set_password(integration_environment):
    client: AsyncClient = integration_environment["client"]
    google = integration_environment["google_validator"]
    google.register("google-token", email="g@x.com", provider_user_id="google-sub-1", display_name="G")

    # First sign-in provisions the account
    response = await client.post(f"{API}/google", json={"id_token": "google-token"})
    assert response.status_code == 200
    tokens = response.json()
    assert tokens["is_new_account"] is True

    # Password login is impossible until a password is set
    response = await client.post(f"{API}/login", json={"email": "g@x.com", "password": "StrongPass1"})
    assert response.status_code == 401

    response = await client.post(
        f"{API}/set-password",
        json={"password": "StrongPass1"},
        headers=integration_environment["auth_headers"](tokens),
    )
    assert response.status_code == 204

    await integration_environment["login"](client, "g@x.com")

    # Second Google sign-in reuses the account
    response = await client.post(f"{API}/google", json={"id_token": "google-token"})
    assert response.status_code == 200
    assert response.json()["is_new_account"] is False


@pytest.mark.integration
async def test_google_login_invalid_token(integration_environment):
    client: AsyncClient = integration_environment["client"]

    response = await client.post(f"{API}/google", json={"id_token": "forged"})

    assert response.status_code == 401
    assert response.json()["detail"] == auth_messages.INVALID_GOOGLE_TOKEN
