"""
Optional Redis connection used for best-effort counters (comment rate limit).

When REDIS_ENABLED is false the dependency yields None and callers skip the
Redis-backed behaviour entirely.
"""
from collections.abc import AsyncGenerator
from typing import Any

import redis.asyncio as aioredis
from fastapi import Depends

from inkwell.config import Settings, get_settings

_client: aioredis.Redis | None = None


def get_redis_client(redis_url: str, **kwargs: Any) -> aioredis.Redis:
    return aioredis.from_url(redis_url, decode_responses=True, **kwargs)


async def get_redis(
    settings: Settings = Depends(get_settings),
) -> AsyncGenerator[aioredis.Redis | None, None]:
    global _client
    if not settings.redis_enabled:
        yield None
        return
    if _client is None:
        _client = get_redis_client(settings.redis_url)
    yield _client


async def close_redis() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
