"""Shared test fixtures for all test groups."""

from datetime import UTC, datetime

import pytest
from fakeredis import FakeAsyncRedis, FakeServer

from storefront.core.clock import fixed_clock
from storefront.core.exceptions import IdentityExistsError
from storefront.db.kv_store import KeyValueStore
from storefront.services.event_tracker import EventTracker

ADMIN_TOKEN = "admin-token"
USER_TOKEN = "user-token"

ADMIN_USER = {
    "id": "admin-001",
    "email": "admin@example.com",
    "user_metadata": {"name": "Admin", "role": "admin"},
}
CUSTOMER_USER = {
    "id": "user-001",
    "email": "jane@example.com",
    "user_metadata": {"name": "Jane", "role": "user"},
}


class FakeIdentityProvider:
    """In-memory stand-in for the hosted auth service."""

    def __init__(self):
        self.sessions = {ADMIN_TOKEN: ADMIN_USER, USER_TOKEN: CUSTOMER_USER}
        self.registered: set[str] = {ADMIN_USER["email"], CUSTOMER_USER["email"]}
        self.created: list[dict] = []
        self.lookups = 0

    async def get_user(self, access_token: str) -> dict | None:
        self.lookups += 1
        return self.sessions.get(access_token)

    async def create_user(self, email: str, password: str, user_metadata: dict) -> dict:
        if email in self.registered:
            raise IdentityExistsError("A user with this email address has already been registered")
        self.registered.add(email)
        user = {"id": f"user-{len(self.created) + 2:03d}", "email": email, "user_metadata": user_metadata}
        self.created.append(user)
        return user


@pytest.fixture
def now():
    """Frozen wall-clock time used across tests."""
    return datetime(2030, 6, 15, 10, 30, 0, tzinfo=UTC)


@pytest.fixture
def clock(now):
    return fixed_clock(now)


@pytest.fixture
def identity_provider():
    return FakeIdentityProvider()


@pytest.fixture
async def redis():
    """Fake Redis on its own server so tests never share keys."""
    fake_redis = FakeAsyncRedis(server=FakeServer(), decode_responses=True)
    yield fake_redis
    await fake_redis.flushall()
    await fake_redis.aclose()


@pytest.fixture
async def store(redis):
    return KeyValueStore(redis)


@pytest.fixture
async def tracker(store, clock):
    return EventTracker(store, clock=clock)
