"""
Conversation service — chat threads, their messages, and operator replies.
"""

import uuid
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.models.conversation import Conversation, Message
from app.schemas.conversation import MessageCreate
from app.services.dashboard_service import business_timezone

logger = get_logger("conversation_service")

# Canned replies offered next to the message box.
QUICK_REPLIES = [
    "Thanks for your order! We're preparing it now.",
    "Your order is on its way and should arrive today.",
    "Could you please confirm your delivery address?",
    "Payment received, thank you!",
    "Sorry for the delay, we're checking on your order right now.",
]


def format_clock(moment: datetime) -> str:
    """12-hour clock without a leading zero, e.g. '2:35 PM'."""
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"


class ConversationService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_conversations(self, platform: str | None = None) -> list[Conversation]:
        query = select(Conversation).order_by(Conversation.created_at.desc())
        if platform and platform != "all":
            query = query.where(Conversation.platform == platform)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_conversation(self, conversation_id: uuid.UUID) -> Conversation | None:
        result = await self.db.execute(
            select(Conversation).where(Conversation.id == conversation_id)
        )
        return result.scalar_one_or_none()

    async def get_messages(self, conversation_id: uuid.UUID) -> list[Message]:
        result = await self.db.execute(
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at)
        )
        return list(result.scalars().all())

    async def send_message(
        self,
        conversation_id: uuid.UUID,
        data: MessageCreate,
        now: datetime | None = None,
    ) -> Message | None:
        """
        Store an operator reply and bump the conversation preview.
        Returns None when the conversation does not exist; raises ValueError
        for blank content.
        """
        content = data.content.strip()
        if not content:
            raise ValueError("Message content cannot be empty")

        conversation = await self.get_conversation(conversation_id)
        if conversation is None:
            return None

        if now is None:
            now = datetime.now(business_timezone())

        message = Message(
            conversation_id=conversation.id,
            content=content,
            is_from_bot=data.is_from_bot,
            timestamp=format_clock(now),
        )
        self.db.add(message)

        conversation.last_message = content
        conversation.time = "now"
        conversation.unread_count = 0

        await self.db.flush()
        await self.db.refresh(message)

        logger.info("Reply sent to conversation %s (%s)", conversation.name, conversation.platform)
        return message
