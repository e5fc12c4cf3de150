"""
Conversation endpoints — chat list, message history, operator replies.
"""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError

from app.api.deps import get_conversation_service
from app.core.exceptions import ApiError
from app.core.logging import get_logger
from app.core.rate_limiter import rate_limit_reply
from app.schemas.conversation import ConversationResponse, MessageCreate, MessageResponse
from app.services.conversation_service import QUICK_REPLIES, ConversationService

router = APIRouter(prefix="/conversations", tags=["Conversations"])
logger = get_logger("conversations")


def _conversation_id(raw: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise ApiError(400, "Invalid conversation ID")


@router.get("", response_model=list[ConversationResponse])
async def list_conversations(
    platform: str | None = Query(None),
    service: ConversationService = Depends(get_conversation_service),
):
    try:
        return await service.list_conversations(platform=platform)
    except SQLAlchemyError as e:
        logger.error("Failed to fetch conversations: %s", str(e))
        raise ApiError(500, "Failed to fetch conversations")


@router.get("/quick-replies", response_model=list[str])
async def list_quick_replies():
    """Canned replies the operator can send with one click."""
    return QUICK_REPLIES


@router.get("/{conversation_id}/messages", response_model=list[MessageResponse])
async def list_messages(
    conversation_id: str,
    service: ConversationService = Depends(get_conversation_service),
):
    conversation_uuid = _conversation_id(conversation_id)
    try:
        return await service.get_messages(conversation_uuid)
    except SQLAlchemyError as e:
        logger.error("Failed to fetch messages for %s: %s", conversation_id, str(e))
        raise ApiError(500, "Failed to fetch messages")


@router.post(
    "/{conversation_id}/messages",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit_reply)],
)
async def send_message(
    conversation_id: str,
    data: MessageCreate,
    service: ConversationService = Depends(get_conversation_service),
):
    """Send a reply into the conversation."""
    conversation_uuid = _conversation_id(conversation_id)
    try:
        message = await service.send_message(conversation_uuid, data)
    except ValueError as e:
        raise ApiError(
            400, "Invalid message data",
            details=[{"loc": ["body", "content"], "msg": str(e)}],
        )
    except SQLAlchemyError as e:
        logger.error("Failed to create message in %s: %s", conversation_id, str(e))
        raise ApiError(500, "Failed to create message")
    if message is None:
        raise ApiError(404, "Conversation not found")
    return message
