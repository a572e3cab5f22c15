"""
End-to-End Access Flow Tests

Tests the complete trace:
Credential → Authorization Resolver → Role Gate → Administration → Audit Ledger

These tests validate the invariant:
"A revoked account loses access on its next request, and every change is on record."
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from accessgate.api.admin.service import AccessAdminService
from accessgate.api.config import settings


# ==================== Health ====================


@pytest.mark.asyncio
async def test_health_check(async_client: AsyncClient):
    response = await async_client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


# ==================== Registration & Login ====================


@pytest.mark.asyncio
async def test_register_login_and_status(async_client: AsyncClient):
    """A new user starts active and can reach user-only endpoints."""
    response = await async_client.post(
        "/api/v1/auth/register",
        json={"email": "new@accessgate.dev", "password": "hunter22"},
    )
    assert response.status_code == 201
    created = response.json()
    assert created["role"] == "USER"
    assert created["access_status"] == "active"
    assert "password_hash" not in created

    response = await async_client.post(
        "/api/v1/auth/login",
        json={"email": "new@accessgate.dev", "password": "hunter22"},
    )
    assert response.status_code == 200
    tokens = response.json()
    assert tokens["token_type"] == "bearer"
    assert tokens["user"]["email"] == "new@accessgate.dev"

    response = await async_client.get(
        "/api/v1/users/status",
        headers={"Authorization": f"Bearer {tokens['access_token']}"},
    )
    assert response.status_code == 200
    assert response.json()["data"]["access_status"] == "active"


@pytest.mark.asyncio
async def test_admin_self_signup_disabled_by_default(async_client: AsyncClient):
    assert settings.ALLOW_ADMIN_SIGNUP is False

    response = await async_client.post(
        "/api/v1/auth/register",
        json={"email": "boss@accessgate.dev", "password": "hunter22", "role": "ADMIN"},
    )

    assert response.status_code == 403
    assert response.json()["code"] == "forbidden"


@pytest.mark.asyncio
async def test_register_duplicate_email(async_client: AsyncClient, test_user):
    response = await async_client.post(
        "/api/v1/auth/register",
        json={"email": test_user.email, "password": "hunter22"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Email already registered"


@pytest.mark.asyncio
async def test_register_short_password(async_client: AsyncClient):
    response = await async_client.post(
        "/api/v1/auth/register",
        json={"email": "short@accessgate.dev", "password": "abc"},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


@pytest.mark.asyncio
async def test_login_failures_do_not_reveal_accounts(async_client: AsyncClient, test_user):
    wrong_password = await async_client.post(
        "/api/v1/auth/login",
        json={"email": test_user.email, "password": "WrongPassword1"},
    )
    unknown_email = await async_client.post(
        "/api/v1/auth/login",
        json={"email": "nobody@accessgate.dev", "password": "WrongPassword1"},
    )

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()


@pytest.mark.asyncio
async def test_revoked_user_cannot_login(async_client: AsyncClient, revoked_user):
    response = await async_client.post(
        "/api/v1/auth/login",
        json={"email": revoked_user.email, "password": "RevokedPassword1"},
    )

    assert response.status_code == 403
    assert response.json()["code"] == "access_revoked"


# ==================== Authorization Outcomes ====================


@pytest.mark.asyncio
async def test_no_credential_stops_before_admin_logic(async_client: AsyncClient, test_user):
    """Unauthenticated requests never reach the role gate or the service."""
    with patch.object(AccessAdminService, "revoke_access", AsyncMock()) as revoke:
        response = await async_client.post(
            "/api/v1/admin/revoke-access",
            json={"user_id": str(test_user.id)},
        )

    assert response.status_code == 401
    assert response.json()["code"] == "unauthenticated"
    assert response.headers["WWW-Authenticate"] == "Bearer"
    revoke.assert_not_called()


@pytest.mark.asyncio
async def test_user_on_admin_endpoint_is_forbidden(
    async_client: AsyncClient,
    auth_headers: dict,
):
    response = await async_client.get("/api/v1/admin/users", headers=auth_headers)

    assert response.status_code == 403
    assert response.json()["code"] == "forbidden"


@pytest.mark.asyncio
async def test_admin_on_user_only_endpoint_is_forbidden(
    async_client: AsyncClient,
    admin_headers: dict,
):
    response = await async_client.get("/api/v1/users/status", headers=admin_headers)

    assert response.status_code == 403
    assert response.json()["code"] == "forbidden"


@pytest.mark.asyncio
async def test_me_available_to_any_active_role(
    async_client: AsyncClient,
    auth_headers: dict,
    admin_headers: dict,
):
    user = await async_client.get("/api/v1/users/me", headers=auth_headers)
    admin = await async_client.get("/api/v1/users/me", headers=admin_headers)

    assert user.status_code == admin.status_code == 200
    assert user.json()["role"] == "USER"
    assert admin.json()["role"] == "ADMIN"


# ==================== Administration ====================


@pytest.mark.asyncio
async def test_list_users_hides_secrets(
    async_client: AsyncClient,
    admin_headers: dict,
    test_user,
):
    response = await async_client.get("/api/v1/admin/users", headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 2
    assert all("password_hash" not in account for account in body["data"])


@pytest.mark.asyncio
async def test_revoke_then_grant_round_trip(
    async_client: AsyncClient,
    admin_headers: dict,
    auth_headers: dict,
    test_user,
    admin_user,
):
    """Revocation takes effect on the next request with the same token."""
    response = await async_client.post(
        "/api/v1/admin/revoke-access",
        json={"user_id": str(test_user.id), "reason": "policy violation"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"] == {
        "user_id": str(test_user.id),
        "email": test_user.email,
        "access_status": "revoked",
    }

    response = await async_client.get("/api/v1/users/status", headers=auth_headers)
    assert response.status_code == 403
    assert response.json()["code"] == "access_revoked"

    response = await async_client.post(
        "/api/v1/admin/grant-access",
        json={"user_id": str(test_user.id)},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["access_status"] == "active"

    response = await async_client.get("/api/v1/users/status", headers=auth_headers)
    assert response.status_code == 200

    response = await async_client.get("/api/v1/admin/access-history", headers=admin_headers)
    history = response.json()
    assert history["count"] == 2
    granted, revoked = history["data"]
    assert granted["action"] == "granted"
    assert granted["reason"] == "Access granted by admin"
    assert revoked["action"] == "revoked"
    assert revoked["reason"] == "policy violation"
    assert revoked["subject_id"] == str(test_user.id)
    assert revoked["actor_email"] == admin_user.email
    assert revoked["subject"]["role"] == "USER"


@pytest.mark.asyncio
async def test_admin_cannot_revoke_self(
    async_client: AsyncClient,
    admin_headers: dict,
    admin_user,
):
    response = await async_client.post(
        "/api/v1/admin/revoke-access",
        json={"user_id": str(admin_user.id)},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["code"] == "self_revocation_forbidden"

    response = await async_client.get("/api/v1/admin/users", headers=admin_headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_missing_user_id(async_client: AsyncClient, admin_headers: dict):
    response = await async_client.post(
        "/api/v1/admin/grant-access",
        json={"reason": "no target"},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "code": "validation_error",
        "message": "User ID is required",
    }


@pytest.mark.asyncio
async def test_unknown_user_id(async_client: AsyncClient, admin_headers: dict):
    response = await async_client.post(
        "/api/v1/admin/revoke-access",
        json={"user_id": str(uuid.uuid4())},
        headers=admin_headers,
    )

    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


@pytest.mark.asyncio
async def test_access_history_limit(
    async_client: AsyncClient,
    admin_headers: dict,
    test_user,
):
    for _ in range(3):
        await async_client.post(
            "/api/v1/admin/revoke-access",
            json={"user_id": str(test_user.id)},
            headers=admin_headers,
        )

    response = await async_client.get(
        "/api/v1/admin/access-history",
        params={"limit": 2},
        headers=admin_headers,
    )

    assert response.status_code == 200
    entries = response.json()["data"]
    assert len(entries) == 2
    assert entries[0]["id"] > entries[1]["id"]


# ==================== Token Refresh ====================


@pytest.mark.asyncio
async def test_refresh_blocked_after_revocation(
    async_client: AsyncClient,
    admin_headers: dict,
    test_user,
):
    login = await async_client.post(
        "/api/v1/auth/login",
        json={"email": test_user.email, "password": "UserPassword1"},
    )
    refresh_token = login.json()["refresh_token"]

    response = await async_client.post(
        "/api/v1/auth/refresh", json={"refresh_token": refresh_token}
    )
    assert response.status_code == 200

    await async_client.post(
        "/api/v1/admin/revoke-access",
        json={"user_id": str(test_user.id)},
        headers=admin_headers,
    )

    response = await async_client.post(
        "/api/v1/auth/refresh", json={"refresh_token": refresh_token}
    )
    assert response.status_code == 403
    assert response.json()["code"] == "access_revoked"


# ==================== Password Length Limits ====================


@pytest.mark.asyncio
async def test_register_rejects_password_over_bcrypt_limit(async_client: AsyncClient):
    """Forty two-byte characters is 80 bytes, past what bcrypt accepts."""
    response = await async_client.post(
        "/api/v1/auth/register",
        json={"email": "long@accessgate.dev", "password": "é" * 40},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


@pytest.mark.asyncio
@pytest.mark.parametrize("email", ["user@accessgate.dev", "nobody@accessgate.dev"])
async def test_login_with_overlong_password_is_unauthenticated(
    async_client: AsyncClient,
    test_user,
    email: str,
):
    response = await async_client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": "x" * 80},
    )

    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "code": "unauthenticated",
        "message": "Invalid email or password",
    }
