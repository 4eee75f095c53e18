"""
Rider application and rider task-list tests.
"""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from parcel_backend.app.core.config import settings
from parcel_backend.app.domain.lifecycle.rider_lifecycle import RiderLifecycle
from parcel_backend.app.models.enums import UserRole
from parcel_backend.app.models.user import User

from conftest import bearer


async def apply(client, email="bike@parcel.test", district="Dhaka", **extra):
    payload = {"name": email.split("@")[0], "email": email, "district": district}
    payload.update(extra)
    response = await client.post("/riders", json=payload)
    assert response.status_code == 201
    return response.json()


async def set_status(client, admin, rider_id, status, **extra):
    return await client.patch(
        f"/riders/{rider_id}/status", json={"status": status, **extra}, headers=bearer(admin.email)
    )


async def user_role(db_session, email):
    result = await db_session.execute(
        select(User.role).where(User.email == email).execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def test_application_starts_pending_and_keeps_extra_fields(client):
    rider = await apply(client, phone="01700000000", bike="Honda", status="active")

    assert rider["status"] == "pending"
    assert rider["phone"] == "01700000000"
    assert rider["bike"] == "Honda"

    listing = await client.get("/riders")
    assert [r["id"] for r in listing.json()] == [rider["id"]]


async def test_pending_and_active_lists_are_admin_only(client, admin, rider_user):
    pending = await apply(client, "p@parcel.test")
    active = await apply(client, "a@parcel.test")
    await set_status(client, admin, active["id"], "active")

    pending_list = await client.get("/riders/pending", headers=bearer(admin.email))
    assert [r["id"] for r in pending_list.json()] == [pending["id"]]

    active_list = await client.get("/riders/active", headers=bearer(admin.email))
    assert [r["id"] for r in active_list.json()] == [active["id"]]

    assert (await client.get("/riders/pending", headers=bearer(rider_user.email))).status_code == 403
    assert (await client.get("/riders/active")).status_code == 401


async def test_available_riders_by_district(client):
    dhaka = await apply(client, "d@parcel.test", district="Dhaka")
    await apply(client, "c@parcel.test", district="Chittagong")

    response = await client.get("/riders/available", params={"district": "Dhaka"})
    assert [r["id"] for r in response.json()] == [dhaka["id"]]

    missing = await client.get("/riders/available")
    assert missing.status_code == 400


async def test_activation_promotes_user_to_rider(client, admin, make_user, db_session):
    await make_user("bike@parcel.test")
    rider = await apply(client)

    response = await set_status(client, admin, rider["id"], "active")

    assert response.status_code == 200
    body = response.json()
    assert body["rider"]["status"] == "active"
    assert body["user_role_updated"] is True
    assert await user_role(db_session, "bike@parcel.test") == UserRole.RIDER


async def test_activation_can_target_another_user_email(client, admin, make_user, db_session):
    await make_user("account@parcel.test")
    rider = await apply(client, "application@parcel.test")

    response = await set_status(client, admin, rider["id"], "active", email="account@parcel.test")

    assert response.json()["user_role_updated"] is True
    assert await user_role(db_session, "account@parcel.test") == UserRole.RIDER


async def test_activation_without_user_still_activates(client, admin):
    rider = await apply(client, "nouser@parcel.test")

    response = await set_status(client, admin, rider["id"], "active")

    assert response.status_code == 200
    assert response.json()["user_role_updated"] is False


async def test_rejection_leaves_user_role_alone(client, admin, make_user, db_session):
    await make_user("bike@parcel.test")
    rider = await apply(client)

    response = await set_status(client, admin, rider["id"], "rejected")

    assert response.status_code == 200
    assert response.json()["user_role_updated"] is False
    assert await user_role(db_session, "bike@parcel.test") == UserRole.USER


async def test_status_change_edge_cases(client, admin):
    rider = await apply(client)

    same = await set_status(client, admin, rider["id"], "pending")
    assert same.status_code == 404

    unknown_rider = await set_status(client, admin, 999, "active")
    assert unknown_rider.status_code == 404

    bad_status = await set_status(client, admin, rider["id"], "retired")
    assert bad_status.status_code == 400


async def test_transactional_activation_rolls_back_with_promotion(client, admin, make_user, mocker):
    await make_user("bike@parcel.test")
    rider = await apply(client)
    mocker.patch.object(settings, "transactional_writes", True)
    mocker.patch.object(RiderLifecycle, "_promote_user", side_effect=SQLAlchemyError("lost connection"))

    response = await set_status(client, admin, rider["id"], "active")

    assert response.status_code == 500
    pending = await client.get("/riders/pending", headers=bearer(admin.email))
    assert [r["id"] for r in pending.json()] == [rider["id"]]


async def test_rider_task_lists(client, admin, rider_user, make_user):
    other = await make_user("other@parcel.test", UserRole.RIDER)

    parcel_ids = []
    for _ in range(3):
        created = await client.post("/parcels", json={"created_by": "s@parcel.test"})
        parcel_ids.append(created.json()["id"])
        await client.patch(
            f"/parcels/{created.json()['id']}/assign",
            json={"riderId": rider_user.id, "riderName": "R", "riderEmail": rider_user.email},
            headers=bearer(admin.email)
        )
    await client.patch(f"/parcels/{parcel_ids[0]}/status", json={"status": "delivered"}, headers=bearer(admin.email))
    await client.patch(f"/parcels/{parcel_ids[1]}/status", json={"status": "in_transit"}, headers=bearer(admin.email))

    own = {"email": rider_user.email}
    open_tasks = await client.get("/rider/parcels", params=own, headers=bearer(rider_user.email))
    assert [p["id"] for p in open_tasks.json()] == [parcel_ids[2], parcel_ids[1]]

    completed = await client.get("/rider/completed-parcels", params=own, headers=bearer(rider_user.email))
    assert [p["id"] for p in completed.json()] == [parcel_ids[0]]

    no_email = await client.get("/rider/parcels", headers=bearer(rider_user.email))
    assert no_email.status_code == 400

    someone_else = await client.get("/rider/parcels", params=own, headers=bearer(other.email))
    assert someone_else.status_code == 403

    not_rider = await client.get("/rider/completed-parcels", params={"email": admin.email}, headers=bearer(admin.email))
    assert not_rider.status_code == 403
