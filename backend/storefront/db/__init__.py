"""Storage package: shared Redis client and the JSON key-value store."""

from storefront.db.kv_store import KeyValueStore
from storefront.db.redis import close_redis, get_redis, init_redis, redis_ready

__all__ = [
    "KeyValueStore",
    "close_redis",
    "get_redis",
    "init_redis",
    "redis_ready",
]
