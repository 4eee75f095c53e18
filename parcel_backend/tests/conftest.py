"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from parcel_backend.app.main import app
from parcel_backend.app.db.session import get_db, Base
from parcel_backend.app.core.redis_client import get_redis
from parcel_backend.app.models.enums import UserRole
from parcel_backend.app.models.user import User
from parcel_backend.app.services.container import get_identity_verifier, get_payment_gateway
from parcel_backend.app.services.identity import IdentityVerificationError

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Bearer tokens accepted by the fake identity provider look like "valid:<email>"
VALID_TOKEN_PREFIX = "valid:"


# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}
        self._closed = False

    async def ping(self):
        if self._closed:
            return False
        return True

    async def get(self, key):
        if self._closed:
            return None
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        if self._closed:
            return False
        self.store[key] = value
        return True

    async def delete(self, key):
        if self._closed:
            return 0
        if key in self.store:
            del self.store[key]
            return 1
        return 0

    async def exists(self, key):
        if self._closed:
            return 0
        return 1 if key in self.store else 0

    async def flushdb(self):
        if not self._closed:
            self.store = {}

    async def aclose(self):
        self._closed = True
        self.store = {}


class FakeIdentityVerifier:
    """Accepts "valid:<email>" tokens, rejects everything else."""

    def __init__(self):
        self.verified = []

    async def verify(self, token):
        if not token.startswith(VALID_TOKEN_PREFIX):
            raise IdentityVerificationError("Token rejected")
        email = token[len(VALID_TOKEN_PREFIX):]
        self.verified.append(email)
        return {"email": email or None, "uid": f"uid-{email}"}


class FakePaymentGateway:
    def __init__(self):
        self.amounts = []
        self.error = None

    async def create_payment_intent(self, amount_in_cents):
        if self.error is not None:
            raise self.error
        self.amounts.append(amount_in_cents)
        return f"pi_{amount_in_cents}_secret"


def bearer(email):
    """Authorization header for a federated principal with ``email``."""
    return {"Authorization": f"Bearer {VALID_TOKEN_PREFIX}{email}"}


def session_cookie(response):
    """Session token from a login response's Set-Cookie header."""
    return response.headers["set-cookie"].split(";", 1)[0].split("=", 1)[1]


def cookie_header(token):
    return {"Cookie": f"token={token}"}


@pytest.fixture
async def session_factory():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def mock_redis():
    return MockRedis()


@pytest.fixture
def identity_verifier():
    return FakeIdentityVerifier()


@pytest.fixture
def payment_gateway():
    return FakePaymentGateway()


@pytest.fixture(autouse=True)
def apply_overrides(session_factory, mock_redis, identity_verifier, payment_gateway):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    async def override_get_redis():
        return mock_redis

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis
    app.dependency_overrides[get_identity_verifier] = lambda: identity_verifier
    app.dependency_overrides[get_payment_gateway] = lambda: payment_gateway
    yield
    app.dependency_overrides = {}


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_user(db_session):
    """Factory creating a user directly in the database."""
    async def _make_user(email, role=UserRole.USER, display_name=None):
        user = User(email=email, role=role, display_name=display_name or email.split("@")[0])
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
async def admin(make_user):
    return await make_user("admin@parcel.test", UserRole.ADMIN)


@pytest.fixture
async def rider_user(make_user):
    return await make_user("rider@parcel.test", UserRole.RIDER)
