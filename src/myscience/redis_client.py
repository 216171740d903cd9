"""Redis client for gamification event fan-out.

Redis is optional here. With ``publish_events`` off the pool is never
created, ``get_event_redis()`` returns None and publishing is skipped.
"""

import redis.asyncio as redis

from myscience.config import get_settings

_pool: redis.Redis | None = None


async def init_redis(url: str) -> None:
    """Create the pool used for PUBLISH calls and readiness pings."""
    global _pool  # noqa: PLW0603
    _pool = redis.from_url(  # type: ignore[no-untyped-call]
        url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=20,
        health_check_interval=30,
    )


async def close_redis() -> None:
    global _pool  # noqa: PLW0603
    if _pool:
        await _pool.aclose()
        _pool = None


def get_redis() -> redis.Redis:
    """Get the Redis client. Raises if the pool was never created."""
    if _pool is None:
        msg = "Redis not initialized. Call init_redis() first."
        raise RuntimeError(msg)
    return _pool


def get_event_redis() -> redis.Redis | None:
    """Client for gamification events, or None when publishing is disabled."""
    if not get_settings().publish_events:
        return None
    return _pool
