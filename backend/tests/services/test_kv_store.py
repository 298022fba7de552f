"""Tests for the Redis-backed JSON key-value store."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from storefront.core.exceptions import UpstreamError
from storefront.db.kv_store import KeyValueStore

pytestmark = pytest.mark.unit


async def test_set_then_get_returns_json_document(store):
    await store.set("products:main:1", {"name": "Robe", "price": 2500, "tags": ["silk"]})

    assert await store.get("products:main:1") == {"name": "Robe", "price": 2500, "tags": ["silk"]}


async def test_get_missing_key_is_none(store):
    assert await store.get("products:main:404") is None


async def test_values_are_stored_as_json_strings(store, redis):
    await store.set("categories:main", ["lingerie", "toys"])

    assert await redis.get("categories:main") == '["lingerie","toys"]'


async def test_delete_removes_key_and_is_idempotent(store):
    await store.set("blog:1", {"title": "Hello"})

    await store.delete("blog:1")
    await store.delete("blog:1")

    assert await store.get("blog:1") is None


async def test_add_only_writes_absent_keys(store):
    assert await store.add("analytics:meta", {"version": "1.0"}) is True
    assert await store.add("analytics:meta", {"version": "2.0"}) is False

    assert await store.get("analytics:meta") == {"version": "1.0"}


async def test_mget_preserves_order_and_misses(store):
    await store.set("a", 1)
    await store.set("c", 3)

    assert await store.mget(["a", "b", "c"]) == [1, None, 3]
    assert await store.mget([]) == []


async def test_get_by_prefix_returns_only_matching_values_in_key_order(store):
    await store.set("products:main:2", {"id": "products:main:2"})
    await store.set("products:main:1", {"id": "products:main:1"})
    await store.set("products:lingerie:1", {"id": "products:lingerie:1"})
    await store.set("orders:1", {"id": "orders:1"})

    main = await store.get_by_prefix("products:main:")
    everything = await store.get_by_prefix("products:")

    assert [p["id"] for p in main] == ["products:main:1", "products:main:2"]
    assert len(everything) == 3


async def test_get_by_prefix_treats_glob_characters_literally(store):
    await store.set("blog:[draft]:1", {"id": 1})
    await store.set("blog:d:1", {"id": 2})

    assert await store.get_by_prefix("blog:[draft]:") == [{"id": 1}]


async def test_get_by_prefix_empty(store):
    assert await store.get_by_prefix("orders:") == []


async def test_update_applies_default_when_absent(store):
    result = await store.update("counter", lambda n: n + 1, default=lambda: 0)

    assert result == 1
    assert await store.get("counter") == 1


async def test_update_folds_existing_value(store):
    await store.set("doc", {"a": 1})

    await store.update("doc", lambda d: {**d, "b": 2})

    assert await store.get("doc") == {"a": 1, "b": 2}


async def test_update_without_default_passes_none(store):
    seen = []

    def fn(current):
        seen.append(current)
        return "x"

    await store.update("fresh", fn)

    assert seen == [None]


async def test_concurrent_updates_do_not_lose_increments(redis):
    store = KeyValueStore(redis, update_retries=50)

    async def bump():
        await store.update("counter", lambda n: n + 1, default=lambda: 0)

    await asyncio.gather(*(bump() for _ in range(20)))

    assert await store.get("counter") == 20


async def test_exception_from_fold_propagates_and_leaves_value(store):
    await store.set("doc", {"a": 1})

    def explode(current):
        raise LookupError("nope")

    with pytest.raises(LookupError):
        await store.update("doc", explode)

    assert await store.get("doc") == {"a": 1}


async def test_redis_errors_become_upstream_errors():
    broken = AsyncMock()
    broken.get.side_effect = RedisConnectionError("connection refused")
    store = KeyValueStore(broken)

    with pytest.raises(UpstreamError) as exc_info:
        await store.get("anything")

    assert exc_info.value.status_code == 500
    assert "connection refused" not in exc_info.value.message
