"""
Pydantic schemas for conversations and messages.
"""

import uuid
from datetime import datetime

from app.schemas.base import CamelModel


class ConversationResponse(CamelModel):
    id: uuid.UUID
    name: str
    initials: str
    last_message: str
    time: str
    unread_count: int
    is_online: bool
    platform: str
    created_at: datetime


class MessageCreate(CamelModel):
    """Operator reply. Replies sent from the dashboard go out as the bot."""
    content: str
    is_from_bot: bool = True


class MessageResponse(CamelModel):
    id: uuid.UUID
    conversation_id: uuid.UUID | None
    content: str
    is_from_bot: bool
    timestamp: str
    created_at: datetime
