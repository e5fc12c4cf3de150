"""
OrderBot Dashboard — Main FastAPI Application
==============================================
Initializes the app with middleware, routes, and lifecycle events.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.router import api_v1_router
from app.core.config import get_settings
from app.core.exceptions import ApiError, api_error_handler
from app.core.logging import RequestLoggingMiddleware, get_logger, setup_logging
from app.core.redis import close_redis

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown events."""
    # ── Startup ──────────────────────────────────────────────────────────
    setup_logging()
    logger = get_logger("main")
    logger.info("Starting %s (env=%s)", settings.APP_NAME, settings.APP_ENV)
    logger.info("API prefix: %s", settings.API_PREFIX)

    try:
        from sqlalchemy import func, select

        from app.core.database import async_session_factory, create_tables, register_models
        from app.models.system_status import SystemStatus

        tables = register_models()

        # In production, rely on Alembic migrations exclusively and never seed.
        if settings.is_production:
            logger.info("Production mode: Alembic migrations only, auto-seeding disabled")
        else:
            await create_tables()
            logger.info("Database tables verified (dev mode, %d tables)", len(tables))

            # An empty database has no status record yet.
            async with async_session_factory() as session:
                result = await session.execute(select(func.count()).select_from(SystemStatus))
                if (result.scalar() or 0) == 0:
                    logger.info("Empty database detected — auto-seeding...")
                    from app.seed import seed_database
                    await seed_database()
                else:
                    logger.info("System status present — skipping seed")
    except Exception as e:
        logger.error("Database setup error: %s", str(e))
        logger.info("Make sure PostgreSQL is running and DATABASE_URL is set")

    yield

    # ── Shutdown ─────────────────────────────────────────────────────────
    logger.info("Shutting down %s...", settings.APP_NAME)
    await close_redis()


def create_app() -> FastAPI:
    """Application factory."""
    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description=(
            "Admin backend for a messaging-bot order workflow: orders, "
            "conversations, payment balance, and bot status."
        ),
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # ── CORS Middleware ──────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(ApiError, api_error_handler)

    # ── Routes ───────────────────────────────────────────────────────────
    app.include_router(api_v1_router, prefix=settings.API_PREFIX)

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "health": f"{settings.API_PREFIX}/health",
        }

    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
