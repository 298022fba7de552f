"""API-specific test fixtures.

The app under test is assembled like ``create_app`` but without the lifespan
(no real Redis), with Redis, the clock and the identity provider overridden.
"""

import pytest
from fakeredis import FakeAsyncRedis, FakeServer
from fastapi import FastAPI
from fastapi.testclient import TestClient

from storefront.api.routes import api_router
from storefront.core.auth import get_identity_provider
from storefront.core.clock import fixed_clock, get_clock
from storefront.db.kv_store import KeyValueStore
from storefront.db.redis import get_redis
from storefront.main import register_exception_handlers
from storefront.middleware.correlation import setup_correlation_middleware


@pytest.fixture
def fake_redis():
    """Provide fakeredis instance for tests."""
    return FakeAsyncRedis(server=FakeServer(), decode_responses=True)


@pytest.fixture
def test_app(fake_redis, identity_provider, now) -> FastAPI:
    app = FastAPI()
    setup_correlation_middleware(app)
    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api")

    app.dependency_overrides[get_redis] = lambda: fake_redis
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider
    app.dependency_overrides[get_clock] = lambda: fixed_clock(now)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def api_client(test_app):
    """TestClient kept open so every request shares one event loop."""
    with TestClient(test_app, raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def kv(fake_redis):
    return KeyValueStore(fake_redis)


@pytest.fixture
def in_app_loop(api_client):
    """Run a coroutine function on the TestClient's event loop (for seeding and inspection)."""

    def _run(fn, *args, **kwargs):
        return api_client.portal.call(lambda: fn(*args, **kwargs))

    return _run


@pytest.fixture
def admin_headers():
    return {"Authorization": "Bearer admin-token"}


@pytest.fixture
def user_headers():
    return {"Authorization": "Bearer user-token"}
