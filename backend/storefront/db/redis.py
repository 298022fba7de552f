"""Process-wide Redis client backing the key-value store."""

import redis.asyncio as redis
import structlog
from redis.exceptions import RedisError

from storefront.core.config import get_settings

logger = structlog.get_logger(__name__)

_redis: redis.Redis | None = None


async def init_redis(url: str | None = None) -> None:
    """Open the shared pool and fail fast if the server does not answer."""
    global _redis

    if _redis is not None:
        return

    settings = get_settings()
    _redis = redis.from_url(
        url or settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=settings.redis_socket_timeout_seconds,
        socket_connect_timeout=settings.redis_socket_timeout_seconds,
        health_check_interval=30,
    )
    await _redis.ping()


async def close_redis() -> None:
    global _redis

    if _redis is not None:
        await _redis.aclose()
        _redis = None


def get_redis() -> redis.Redis:
    """FastAPI dependency returning the shared client.

    Raises RuntimeError if init_redis() has not been called.
    """
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis


async def redis_ready() -> bool:
    """True when the shared client exists and answers PING."""
    if _redis is None:
        return False
    try:
        return bool(await _redis.ping())
    except RedisError as e:
        logger.error("redis_ping_failed", error=str(e), error_type=type(e).__name__)
        return False
