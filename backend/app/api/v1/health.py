"""
Health check endpoints.
Reports database and Redis reachability with round-trip latency.
"""

from fastapi import APIRouter

from app.core.config import get_settings
from app.core.database import ping_database
from app.core.logging import get_logger
from app.core.redis import ping_redis

router = APIRouter(tags=["Health"])
logger = get_logger("health")
settings = get_settings()


@router.get("/health")
async def health_check():
    """Service status; `degraded` when the database or Redis is unreachable."""
    health = {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.APP_ENV,
        "database": "unknown",
        "redis": "unknown",
    }

    for component, probe in (("database", ping_database), ("redis", ping_redis)):
        try:
            latency_ms = await probe()
            health[component] = f"connected ({latency_ms}ms)"
        except Exception as e:
            health[component] = f"error: {str(e)}"
            health["status"] = "degraded"
            logger.error("%s health check failed: %s", component.capitalize(), str(e))

    return health


@router.get("/ping")
async def ping():
    """Liveness probe for the load balancer."""
    return {"ping": "pong"}
