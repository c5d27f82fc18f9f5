"""
Message Routes - direct messages between listed profiles
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.core.exceptions import APIException, UpstreamError
from app.database.connection import get_db
from app.models.messages import MessageCreateRequest, MessageResponse
from app.services.message_service import message_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/messages", tags=["Messages"])


def _message_view(message) -> dict:
    return MessageResponse(
        id=str(message.id),
        sender_profile_id=message.sender_profile_id,
        recipient_profile_id=message.recipient_profile_id,
        message=message.message,
        created_at=message.created_at
    ).model_dump(by_alias=True, mode="json")


@router.post("", status_code=status.HTTP_201_CREATED)
async def send_message(request: MessageCreateRequest, db: AsyncSession = Depends(get_db)):
    try:
        message = await message_service.send_message(db, request)
        return {"success": True, "message": _message_view(message)}

    except APIException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error sending message: {e}")
        raise UpstreamError("Failed to send message")


@router.get("")
async def list_messages(
    profile_id: str = Query(..., alias="profileId", min_length=1),
    db: AsyncSession = Depends(get_db)
):
    """Messages received by a profile, newest first"""
    try:
        messages = await message_service.list_received(db, profile_id)
        return {"success": True, "messages": [_message_view(message) for message in messages]}

    except SQLAlchemyError as e:
        logger.error(f"Error fetching messages: {e}")
        raise UpstreamError("Failed to fetch messages")
