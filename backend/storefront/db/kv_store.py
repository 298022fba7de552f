"""JSON key-value store over Redis.

Every value is a JSON document stored as a Redis string. Keys are namespaced
by resource type (``products:``, ``orders:``, ``blog:``, ``analytics:``...).
"""

import json
from collections.abc import Callable
from typing import Any

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError, WatchError

from storefront.core.exceptions import UpstreamError

logger = structlog.get_logger(__name__)

_GLOB_SPECIAL = str.maketrans({"*": r"\*", "?": r"\?", "[": r"\[", "]": r"\]"})

_SCAN_BATCH = 500


def _encode(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _decode(raw: str | None) -> Any:
    if raw is None:
        return None
    return json.loads(raw)


class KeyValueStore:
    """Point get/set/delete, prefix scan, multi-get and compare-and-swap update.

    Redis failures are re-raised as UpstreamError so the API layer renders
    them as 500s without leaking connection details.
    """

    def __init__(self, redis: Redis, update_retries: int = 10):
        self.redis = redis
        self.update_retries = update_retries

    async def get(self, key: str) -> Any:
        try:
            return _decode(await self.redis.get(key))
        except RedisError as exc:
            raise UpstreamError("Key-value store unavailable") from exc

    async def set(self, key: str, value: Any) -> None:
        try:
            await self.redis.set(key, _encode(value))
        except RedisError as exc:
            raise UpstreamError("Key-value store unavailable") from exc

    async def add(self, key: str, value: Any) -> bool:
        """Write ``value`` only if ``key`` is absent. Returns True when written."""
        try:
            return bool(await self.redis.set(key, _encode(value), nx=True))
        except RedisError as exc:
            raise UpstreamError("Key-value store unavailable") from exc

    async def delete(self, key: str) -> None:
        try:
            await self.redis.delete(key)
        except RedisError as exc:
            raise UpstreamError("Key-value store unavailable") from exc

    async def mget(self, keys: list[str]) -> list[Any]:
        """Fetch many keys in one round trip. Misses come back as None, in order."""
        if not keys:
            return []
        try:
            raw_values = await self.redis.mget(keys)
        except RedisError as exc:
            raise UpstreamError("Key-value store unavailable") from exc
        return [_decode(raw) for raw in raw_values]

    async def get_by_prefix(self, prefix: str) -> list[Any]:
        """Return every value whose key starts with ``prefix``, ordered by key."""
        pattern = prefix.translate(_GLOB_SPECIAL) + "*"
        try:
            keys = [key async for key in self.redis.scan_iter(match=pattern, count=_SCAN_BATCH)]
        except RedisError as exc:
            raise UpstreamError("Key-value store unavailable") from exc
        # SCAN may yield a key more than once
        keys = sorted(set(keys))
        values = await self.mget(keys)
        return [value for value in values if value is not None]

    async def update(
        self,
        key: str,
        fn: Callable[[Any], Any],
        default: Callable[[], Any] | None = None,
    ) -> Any:
        """Atomically read-modify-write ``key``.

        WATCHes the key, applies ``fn`` to the current value (or ``default()``
        when absent) and commits in MULTI/EXEC. A concurrent writer aborts the
        transaction and the fold is retried against the fresh value.
        """
        for attempt in range(1, self.update_retries + 1):
            try:
                async with self.redis.pipeline(transaction=True) as pipe:
                    await pipe.watch(key)
                    current = _decode(await pipe.get(key))
                    if current is None and default is not None:
                        current = default()
                    updated = fn(current)
                    pipe.multi()
                    pipe.set(key, _encode(updated))
                    await pipe.execute()
                    return updated
            except WatchError:
                logger.debug("kv_update_conflict", key=key, attempt=attempt)
                continue
            except RedisError as exc:
                raise UpstreamError("Key-value store unavailable") from exc

        raise UpstreamError(f"Concurrent update on {key} did not settle")
