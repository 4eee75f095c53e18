"""
User directory and role management tests.
"""

import pytest

from parcel_backend.app.models.enums import UserRole

from conftest import bearer


async def test_upsert_creates_then_updates(client):
    payload = {
        "email": "sender@parcel.test",
        "displayName": "Sender",
        "photoURL": "https://img.test/a.png",
        "lastSignInTime": "Mon, 01 Jan 2024 10:00:00 GMT",
    }

    created = await client.post("/users", json=payload)
    assert created.status_code == 201
    body = created.json()
    assert body["role"] == "user"
    assert body["displayName"] == "Sender"
    assert body["photoURL"] == "https://img.test/a.png"

    payload["displayName"] = "Renamed"
    updated = await client.post("/users", json=payload)
    assert updated.status_code == 200
    assert updated.json()["id"] == body["id"]
    assert updated.json()["displayName"] == "Renamed"

    listing = await client.get("/users")
    assert len(listing.json()) == 1


async def test_upsert_cannot_escalate_role(client):
    response = await client.post("/users", json={"email": "sneaky@parcel.test", "role": "admin"})
    assert response.status_code == 403

    assert (await client.get("/users/sneaky@parcel.test")).status_code == 404


async def test_upsert_keeps_existing_role(client, rider_user):
    response = await client.post("/users", json={"email": rider_user.email, "displayName": "Rider"})

    assert response.status_code == 200
    assert response.json()["role"] == "rider"


async def test_list_users_filtered_by_email(client, make_user):
    await make_user("a@parcel.test")
    await make_user("b@parcel.test")

    all_users = await client.get("/users")
    assert {u["email"] for u in all_users.json()} == {"a@parcel.test", "b@parcel.test"}

    only_b = await client.get("/users", params={"email": "b@parcel.test"})
    assert [u["email"] for u in only_b.json()] == ["b@parcel.test"]

    none = await client.get("/users", params={"email": "c@parcel.test"})
    assert none.json() == []


async def test_get_user_by_email(client, make_user):
    await make_user("a@parcel.test")

    found = await client.get("/users/a@parcel.test")
    assert found.status_code == 200
    assert found.json()["email"] == "a@parcel.test"

    missing = await client.get("/users/zzz@parcel.test")
    assert missing.status_code == 404
    assert missing.json()["error_code"] == "ERR_NOT_FOUND_001"


async def test_admin_sets_user_role(client, admin, make_user):
    user = await make_user("a@parcel.test")

    response = await client.patch(f"/users/{user.id}/role", json={"role": "rider"}, headers=bearer(admin.email))
    assert response.status_code == 200
    assert response.json()["user"]["role"] == "rider"

    # Same role again changes nothing
    again = await client.patch(f"/users/{user.id}/role", json={"role": "rider"}, headers=bearer(admin.email))
    assert again.status_code == 404


async def test_set_role_rejects_unknown_role(client, admin, make_user):
    user = await make_user("a@parcel.test")

    response = await client.patch(f"/users/{user.id}/role", json={"role": "superuser"}, headers=bearer(admin.email))

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_VALIDATION"


async def test_set_role_unknown_user_is_404(client, admin):
    response = await client.patch("/users/999/role", json={"role": "rider"}, headers=bearer(admin.email))
    assert response.status_code == 404


@pytest.mark.parametrize("role", [UserRole.USER, UserRole.RIDER])
async def test_set_role_requires_admin(client, make_user, role):
    caller = await make_user("caller@parcel.test", role)
    target = await make_user("target@parcel.test")

    response = await client.patch(f"/users/{target.id}/role", json={"role": "admin"}, headers=bearer(caller.email))

    assert response.status_code == 403
