"""
Integration tests for the session and federated authentication flows.

Login -> session-admin route -> Logout -> token rejected.
"""

import pytest
from sqlalchemy import select

from parcel_backend.app.models.audit_log import AuditLog
from parcel_backend.app.models.enums import UserRole
from parcel_backend.app.services.audit import AuditAction, get_audit_trail

from conftest import bearer, cookie_header, session_cookie


async def test_login_unknown_email_is_rejected(client, db_session):
    response = await client.post("/login", json={"email": "ghost@parcel.test"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email"
    assert "set-cookie" not in response.headers

    result = await db_session.execute(select(AuditLog).where(AuditLog.action == AuditAction.LOGIN_FAILED))
    assert result.scalar_one().actor_email == "ghost@parcel.test"


async def test_login_missing_email_is_400(client):
    response = await client.post("/login", json={})
    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_VALIDATION"


async def test_login_sets_httponly_session_cookie(client, make_user):
    await make_user("sender@parcel.test")

    response = await client.post("/login", json={"email": "sender@parcel.test"})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    assert body["user"] == {"email": "sender@parcel.test", "role": "user"}

    set_cookie = response.headers["set-cookie"].lower()
    assert set_cookie.startswith("token=")
    assert "httponly" in set_cookie
    assert "max-age=3600" in set_cookie


async def test_session_admin_can_promote_user(client, admin, make_user):
    await make_user("sender@parcel.test")
    login = await client.post("/login", json={"email": admin.email})
    token = session_cookie(login)

    response = await client.patch("/users/make-admin/sender@parcel.test", headers=cookie_header(token))

    assert response.status_code == 200
    assert response.json()["user"]["role"] == "admin"


async def test_make_admin_requires_session_cookie(client, admin):
    # A federated token is not accepted on the session-auth route
    response = await client.patch("/users/make-admin/someone@parcel.test", headers=bearer(admin.email))
    assert response.status_code == 401


async def test_make_admin_rejects_tampered_cookie(client, admin):
    response = await client.patch(
        "/users/make-admin/someone@parcel.test", headers=cookie_header("not-a-jwt")
    )
    assert response.status_code == 401


async def test_make_admin_requires_admin_role(client, make_user):
    await make_user("plain@parcel.test")
    login = await client.post("/login", json={"email": "plain@parcel.test"})

    response = await client.patch(
        "/users/make-admin/plain@parcel.test", headers=cookie_header(session_cookie(login))
    )

    assert response.status_code == 403
    assert response.json()["message"] == "Forbidden access: Not a admin"


async def test_make_admin_unknown_user_is_404(client, admin):
    login = await client.post("/login", json={"email": admin.email})

    response = await client.patch(
        "/users/make-admin/nobody@parcel.test", headers=cookie_header(session_cookie(login))
    )

    assert response.status_code == 404


async def test_logout_revokes_session_token(client, admin, mock_redis, db_session):
    login = await client.post("/login", json={"email": admin.email})
    token = session_cookie(login)

    logout = await client.post("/logout", headers=cookie_header(token))
    assert logout.status_code == 200
    assert logout.json()["message"] == "Logged out successfully"
    assert "max-age=0" in logout.headers["set-cookie"].lower()
    assert len(mock_redis.store) == 1

    # The copied cookie is now refused
    response = await client.patch("/users/make-admin/admin@parcel.test", headers=cookie_header(token))
    assert response.status_code == 401
    assert response.json()["error_code"] == "ERR_AUTH_002"

    trail = await get_audit_trail(db_session, target=f"user:{admin.email}")
    assert [e.action for e in trail] == [AuditAction.LOGOUT, AuditAction.LOGIN_SUCCESS]


async def test_logout_without_cookie_always_succeeds(client, mock_redis):
    response = await client.post("/logout")

    assert response.status_code == 200
    set_cookie = response.headers["set-cookie"].lower()
    assert set_cookie.startswith("token=")
    assert "max-age=0" in set_cookie
    assert mock_redis.store == {}


async def test_federated_missing_header_is_401(client):
    response = await client.patch("/parcels/1/status", json={"status": "in_transit"})
    assert response.status_code == 401
    assert response.json()["error_code"] == "ERR_AUTH_001"


async def test_federated_rejected_token_is_401(client):
    response = await client.patch(
        "/parcels/1/status",
        json={"status": "in_transit"},
        headers={"Authorization": "Bearer forged"}
    )
    assert response.status_code == 401


async def test_federated_role_guard_requires_known_user(client):
    # Verified identity but no user record
    response = await client.get("/riders/pending", headers=bearer("stranger@parcel.test"))
    assert response.status_code == 403


async def test_federated_token_without_email_is_401(client):
    response = await client.get("/riders/pending", headers=bearer(""))
    assert response.status_code == 401


async def test_role_lookup(client, rider_user):
    response = await client.get(f"/users/role/{rider_user.email}")
    assert response.status_code == 200
    assert response.json() == {"role": UserRole.RIDER.value}

    missing = await client.get("/users/role/nobody@parcel.test")
    assert missing.status_code == 404
