"""
System status model — the single record shown on the System page.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class SystemStatus(Base):
    """
    Bot / webhook / database / API status snapshot.

    `revision` increases by one on every write. Writers that were scheduled
    earlier (the delayed restart) compare it before applying their update.
    """

    __tablename__ = "system_status"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )

    bot_status: Mapped[str] = mapped_column(String(50), nullable=False)
    webhook_status: Mapped[str] = mapped_column(String(50), nullable=False)
    db_status: Mapped[str] = mapped_column(String(50), nullable=False)
    api_status: Mapped[str] = mapped_column(String(50), nullable=False)

    uptime: Mapped[str] = mapped_column(String(20), nullable=False)
    version: Mapped[str] = mapped_column(String(20), nullable=False)
    build: Mapped[str] = mapped_column(String(20), nullable=False)
    environment: Mapped[str] = mapped_column(String(50), nullable=False)
    server: Mapped[str] = mapped_column(String(100), nullable=False)
    region: Mapped[str] = mapped_column(String(100), nullable=False)
    last_deploy: Mapped[str] = mapped_column(String(50), nullable=False)

    cpu_usage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    memory_usage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    disk_usage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    revision: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<SystemStatus bot={self.bot_status} rev={self.revision}>"
