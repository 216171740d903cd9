"""FastAPI dependencies shared by routers that record gamified actions."""

from collections.abc import AsyncGenerator

import redis.asyncio as redis

from myscience.redis_client import get_event_redis


async def get_event_publisher() -> AsyncGenerator[redis.Redis | None, None]:
    """Yield the Redis client badge and level-up events go to (None disables them)."""
    yield get_event_redis()
