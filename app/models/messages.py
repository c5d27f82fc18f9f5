"""
Direct message models
"""
from typing import Optional
from datetime import datetime

from app.models.profile import CamelModel


class MessageCreateRequest(CamelModel):
    sender_profile_id: Optional[str] = None
    recipient_profile_id: Optional[str] = None
    message: Optional[str] = None


class MessageResponse(CamelModel):
    id: str
    sender_profile_id: str
    recipient_profile_id: str
    message: str
    created_at: datetime
