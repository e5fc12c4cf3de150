"""
Conversation and Message models — chats between customers and the bot
(or the operator replying through the dashboard).
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base


class Conversation(Base):
    """A chat thread with one customer on one platform."""

    __tablename__ = "conversations"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    initials: Mapped[str] = mapped_column(String(8), nullable=False)
    last_message: Mapped[str] = mapped_column(Text, nullable=False, default="")
    time: Mapped[str] = mapped_column(String(50), nullable=False, default="")  # "2m", "1h"
    unread_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_online: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    platform: Mapped[str] = mapped_column(
        String(50), nullable=False, index=True
    )  # telegram_bot, telegram_personal, messenger

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )

    messages: Mapped[list["Message"]] = relationship(
        back_populates="conversation", cascade="all, delete-orphan", lazy="noload"
    )

    def __repr__(self) -> str:
        return f"<Conversation {self.name} ({self.platform})>"


class Message(Base):
    """A single chat message."""

    __tablename__ = "messages"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    conversation_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=True, index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_from_bot: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    timestamp: Mapped[str] = mapped_column(String(20), nullable=False)  # "2:35 PM"

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc),
        nullable=False, index=True,
    )

    conversation: Mapped["Conversation | None"] = relationship(back_populates="messages")

    def __repr__(self) -> str:
        sender = "bot" if self.is_from_bot else "customer"
        return f"<Message {sender} @ {self.timestamp}>"
