"""
Redis connection manager.
Backs the per-IP rate limiter; also probed by health and network diagnostics.
"""

import time

import redis.asyncio as aioredis

from app.core.config import get_settings

settings = get_settings()

redis_client: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    """Shared client, created on first use."""
    global redis_client
    if redis_client is None:
        # Short connect timeout: the limiter fails open rather than stalling requests
        redis_client = aioredis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            max_connections=10,
            socket_connect_timeout=2,
        )
    return redis_client


async def ping_redis() -> int:
    """PING round trip in ms; raises when Redis is unreachable."""
    client = await get_redis()
    started = time.perf_counter()
    await client.ping()
    return int((time.perf_counter() - started) * 1000)


async def close_redis() -> None:
    global redis_client
    if redis_client is not None:
        await redis_client.aclose()
        redis_client = None
