"""
Tracking log tests.
"""

from datetime import datetime, timedelta, timezone

from parcel_backend.app.models.tracking_event import TrackingEvent


async def test_add_and_read_tracking_updates(client):
    first = await client.post("/trackings", json={
        "tracking_id": "TRK-9", "status": "picked_up", "location": "Dhaka hub", "timestamp": "1999-01-01"
    })
    assert first.status_code == 201
    body = first.json()
    assert body["location"] == "Dhaka hub"
    assert body["timestamp"] != "1999-01-01"

    await client.post("/trackings", json={"tracking_id": "TRK-9", "status": "in_transit"})
    await client.post("/trackings", json={"tracking_id": "OTHER", "status": "pending"})

    history = await client.get("/trackings/TRK-9")
    assert history.status_code == 200
    assert [e["status"] for e in history.json()] == ["picked_up", "in_transit"]


async def test_history_is_ordered_by_timestamp(client, db_session):
    base = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    db_session.add_all([
        TrackingEvent(tracking_id="TRK-OOO", status="third", details={}, timestamp=base + timedelta(hours=2)),
        TrackingEvent(tracking_id="TRK-OOO", status="first", details={}, timestamp=base),
        TrackingEvent(tracking_id="TRK-OOO", status="second", details={}, timestamp=base + timedelta(hours=1)),
    ])
    await db_session.commit()

    history = await client.get("/trackings/TRK-OOO")

    assert [e["status"] for e in history.json()] == ["first", "second", "third"]


async def test_unknown_tracking_id_has_empty_history(client):
    response = await client.get("/trackings/NOPE")
    assert response.status_code == 200
    assert response.json() == []


async def test_tracking_update_requires_id_and_status(client):
    missing_status = await client.post("/trackings", json={"tracking_id": "TRK-1"})
    assert missing_status.status_code == 400

    empty_id = await client.post("/trackings", json={"tracking_id": "", "status": "x"})
    assert empty_id.status_code == 400
