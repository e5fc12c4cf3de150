"""
Async database engine, session management and schema helpers.
SQLAlchemy 2.0 async over asyncpg.
"""

import time
from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import get_settings

settings = get_settings()

# ── Engine ───────────────────────────────────────────────────────────────────
# A single dashboard instance polls a small set of tables; a modest pool is enough.
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    pool_size=10,
    max_overflow=5,
    pool_pre_ping=True,
    pool_recycle=300,
)

# ── Session Factory ──────────────────────────────────────────────────────────
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ───────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """Declarative base for all ORM models."""
    pass


def register_models() -> list[str]:
    """Import every model module so `Base.metadata` is complete; returns the table names."""
    from app.models.approval import PendingOrderApproval, PendingUserApproval  # noqa: F401
    from app.models.conversation import Conversation, Message  # noqa: F401
    from app.models.order import Order  # noqa: F401
    from app.models.system_status import SystemStatus  # noqa: F401
    from app.models.transaction import Transaction  # noqa: F401

    return [table.name for table in Base.metadata.sorted_tables]


async def create_tables(drop_first: bool = False) -> None:
    """Create (optionally after dropping) every dashboard table. Dev only."""
    register_models()
    async with engine.begin() as conn:
        if drop_first:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


async def ping_database() -> int:
    """Round-trip `SELECT 1`; returns latency in ms, raises on failure."""
    started = time.perf_counter()
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    return int((time.perf_counter() - started) * 1000)


# ── Dependency ───────────────────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, committed on success."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
