"""
Authorization facade tests — token to decision, and the outward mapping
of each failure kind to a stable code.
"""

import uuid

import pytest
from httpx import AsyncClient

from app.core import rbac
from app.core.exceptions import (
    DataAccessError,
    NotFoundError,
    PermissionDeniedError,
    TokenExpiredError,
    TokenMalformedError,
)
from app.core.security import issue_token
from app.db.seed import ROLE_ADMINS
from app.services.access import check_access

CHECK_URL = "/api/v1/admin/access/check"


async def test_check_access_returns_authorized_user(db_session, make_admin, grant_role):
    await grant_role(ROLE_ADMINS, (rbac.CAN_READ, rbac.ENTITY_ADMIN_DASHBOARD))
    user = await make_admin("facade@example.com", roles=[ROLE_ADMINS])

    result = await check_access(
        db_session, issue_token(user.id), rbac.CAN_READ, rbac.ENTITY_ADMIN_DASHBOARD
    )
    assert result.id == user.id


async def test_check_access_without_token(db_session):
    with pytest.raises(TokenMalformedError):
        await check_access(db_session, None, rbac.CAN_READ, rbac.ENTITY_ADMIN_DASHBOARD)


async def test_check_access_with_expired_token(db_session, make_admin):
    user = await make_admin("late@example.com")
    with pytest.raises(TokenExpiredError):
        await check_access(
            db_session, issue_token(user.id, ttl=-1), rbac.CAN_READ, rbac.ENTITY_ADMIN_DASHBOARD
        )


async def test_check_access_keeps_failure_kinds(db_session, make_admin):
    user = await make_admin("kinds@example.com")
    token = issue_token(user.id)
    with pytest.raises(PermissionDeniedError):
        await check_access(db_session, token, rbac.CAN_READ, rbac.ENTITY_ADMIN_DASHBOARD)
    with pytest.raises(NotFoundError):
        await check_access(db_session, token, rbac.CAN_READ, "Resource::Unknown")


# ── HTTP boundary ───────────────────────────────────────────────────
async def test_http_granted(async_client: AsyncClient, make_admin, grant_role, auth_headers):
    await grant_role(ROLE_ADMINS, (rbac.CAN_READ, rbac.ENTITY_ADMIN_DASHBOARD))
    user = await make_admin("http-ok@example.com", roles=[ROLE_ADMINS])

    resp = await async_client.post(
        CHECK_URL,
        json={"action": rbac.CAN_READ, "entity": rbac.ENTITY_ADMIN_DASHBOARD},
        headers=auth_headers(user),
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["allowed"] is True
    assert data["user"]["id"] == str(user.id)
    assert "password_hash" not in data["user"]


async def test_http_missing_token_is_unauthenticated(async_client: AsyncClient):
    resp = await async_client.post(
        CHECK_URL, json={"action": rbac.CAN_READ, "entity": rbac.ENTITY_ADMIN_DASHBOARD}
    )
    assert resp.status_code == 401
    body = resp.json()
    assert body["code"] == "UNAUTHENTICATED"
    assert body["reason"] == "INVALID_TOKEN"
    assert body["success"] is False
    assert resp.headers["www-authenticate"] == "Bearer"


async def test_http_expired_token_differs_from_invalid(async_client: AsyncClient):
    expired = issue_token(uuid.uuid4(), ttl=-60)
    resp = await async_client.post(
        CHECK_URL,
        json={"action": rbac.CAN_READ, "entity": rbac.ENTITY_ADMIN_DASHBOARD},
        headers={"Authorization": f"Bearer {expired}"},
    )
    assert resp.status_code == 401
    assert resp.json()["code"] == "UNAUTHENTICATED"
    assert resp.json()["reason"] == "TOKEN_EXPIRED"


async def test_http_denied_is_forbidden(async_client: AsyncClient, make_admin, auth_headers):
    user = await make_admin("http-denied@example.com")
    resp = await async_client.post(
        CHECK_URL,
        json={"action": rbac.CAN_DELETE, "entity": rbac.ENTITY_INVOICE_RESOURCE},
        headers=auth_headers(user),
    )
    assert resp.status_code == 403
    body = resp.json()
    assert body["code"] == "FORBIDDEN"
    assert body["detail"] == "Access denied."
    assert "no roles" not in resp.text


async def test_http_unknown_action_is_not_found(async_client: AsyncClient, make_admin, auth_headers):
    user = await make_admin("http-404@example.com")
    resp = await async_client.post(
        CHECK_URL,
        json={"action": "can_teleport", "entity": rbac.ENTITY_ADMIN_DASHBOARD},
        headers=auth_headers(user),
    )
    assert resp.status_code == 404
    assert resp.json()["code"] == "NOT_FOUND"
    assert "can_teleport" not in resp.text


async def test_http_data_access_error_is_masked(
    async_client: AsyncClient, make_admin, auth_headers, monkeypatch
):
    user = await make_admin("http-500@example.com")

    async def _broken(*_args, **_kwargs):
        raise DataAccessError("password authentication failed for user 'backoffice'")

    monkeypatch.setattr("app.services.access.authorize", _broken)
    resp = await async_client.post(
        CHECK_URL,
        json={"action": rbac.CAN_READ, "entity": rbac.ENTITY_ADMIN_DASHBOARD},
        headers=auth_headers(user),
    )
    assert resp.status_code == 500
    assert resp.json()["code"] == "INTERNAL_ERROR"
    assert "password authentication" not in resp.text


async def test_http_token_from_cookie(async_client: AsyncClient, make_admin, grant_role):
    await grant_role(ROLE_ADMINS, (rbac.CAN_READ, rbac.ENTITY_ADMIN_DASHBOARD))
    user = await make_admin("cookie@example.com", roles=[ROLE_ADMINS])
    async_client.cookies.set("access_token", f"Bearer {issue_token(user.id)}")

    resp = await async_client.post(
        CHECK_URL, json={"action": rbac.CAN_READ, "entity": rbac.ENTITY_ADMIN_DASHBOARD}
    )
    assert resp.status_code == 200
