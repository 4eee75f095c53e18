"""
First-admin seeding tests.
"""

import pytest
from sqlalchemy import inspect, select
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from parcel_backend import seed_users
from parcel_backend.app.models.enums import UserRole
from parcel_backend.app.models.user import User


@pytest.fixture
async def empty_engine(mocker):
    """Schema-less database swapped in for the seed script's engine."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    mocker.patch.object(seed_users, "engine", engine)
    mocker.patch.object(seed_users, "AsyncSessionLocal", factory)
    yield engine, factory
    await engine.dispose()


async def test_seed_creates_every_table(empty_engine):
    engine, _ = empty_engine

    await seed_users.seed_admin("root@parcel.test")

    async with engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
    assert set(tables) >= {"users", "parcels", "riders", "payments", "tracking_events", "audit_logs"}


async def test_seed_promotes_existing_user(empty_engine):
    engine, factory = empty_engine
    await seed_users.seed_admin("root@parcel.test")
    async with factory() as db:
        db.add(User(email="plain@parcel.test", role=UserRole.USER))
        await db.commit()

    await seed_users.seed_admin("plain@parcel.test")

    async with factory() as db:
        result = await db.execute(select(User.role).where(User.email == "plain@parcel.test"))
        assert result.scalar_one() == UserRole.ADMIN
