"""
Message Service - direct messages between listed profiles
"""
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import MissingFieldsError, NotFoundError
from app.database.models import Message
from app.models.messages import MessageCreateRequest
from app.services.profile_service import profile_service
from app.utils.clock import utcnow

logger = logging.getLogger(__name__)


class MessageService:

    async def send_message(self, db: AsyncSession, data: MessageCreateRequest) -> Message:
        fields = {
            "senderProfileId": data.sender_profile_id,
            "recipientProfileId": data.recipient_profile_id,
            "message": data.message,
        }
        missing = [name for name, value in fields.items() if not value or not value.strip()]
        if missing:
            raise MissingFieldsError(missing)

        for profile_id, label in ((data.sender_profile_id, "Sender"), (data.recipient_profile_id, "Recipient")):
            if await profile_service.get_by_profile_id(db, profile_id) is None:
                raise NotFoundError(f"{label} profile not found", code="profile_not_found")

        message = Message(
            sender_profile_id=data.sender_profile_id,
            recipient_profile_id=data.recipient_profile_id,
            message=data.message,
            created_at=utcnow()
        )
        db.add(message)
        await db.commit()
        logger.info(f"Message {message.id} sent {data.sender_profile_id} -> {data.recipient_profile_id}")
        return message

    async def list_received(self, db: AsyncSession, profile_id: str) -> List[Message]:
        result = await db.execute(
            select(Message)
            .where(Message.recipient_profile_id == profile_id)
            .order_by(Message.created_at.desc())
        )
        return list(result.scalars().all())


message_service = MessageService()
