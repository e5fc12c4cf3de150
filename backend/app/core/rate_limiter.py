"""
Rate limiting for the dashboard's mutating actions.

Fixed one-minute windows in Redis, keyed by client IP and an action scope
(`lifecycle`, `withdraw`, `reply`). Restart, stop and webhook updates share
the `lifecycle` bucket, so alternating between them does not dodge the limit.
A Redis outage fails open.

    @router.post("/bot/stop", dependencies=[Depends(rate_limit_lifecycle)])
"""

from fastapi import Request

from app.core.config import get_settings
from app.core.exceptions import ApiError
from app.core.logging import get_logger
from app.core.redis import get_redis

logger = get_logger("rate_limiter")
settings = get_settings()

WINDOW_SECONDS = 60


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def check_rate_limit(request: Request, scope: str, limit: int) -> None:
    """Count one request in `scope`; ApiError(429) once `limit` is exceeded."""
    key = f"rl:{scope}:{client_ip(request)}"

    try:
        redis = await get_redis()
        count = await redis.incr(key)
        if count == 1:
            await redis.expire(key, WINDOW_SECONDS)
    except Exception as exc:
        logger.error("Rate limiter Redis error (allowing request through): %s", exc)
        return

    if count > limit:
        logger.warning(
            "Rate limit hit: %s on %s (%d/%d per %ds)",
            client_ip(request), scope, count, limit, WINDOW_SECONDS,
        )
        raise ApiError(
            429,
            "Too many requests. Please slow down and try again.",
            headers={"Retry-After": str(WINDOW_SECONDS)},
        )


async def rate_limit_lifecycle(request: Request) -> None:
    """Bot restart / stop / webhook update."""
    await check_rate_limit(request, "lifecycle", settings.RATE_LIMIT_LIFECYCLE_PER_MINUTE)


async def rate_limit_withdraw(request: Request) -> None:
    await check_rate_limit(request, "withdraw", settings.RATE_LIMIT_WITHDRAW_PER_MINUTE)


async def rate_limit_reply(request: Request) -> None:
    """Operator replies into conversations."""
    await check_rate_limit(request, "reply", settings.RATE_LIMIT_PER_MINUTE)
