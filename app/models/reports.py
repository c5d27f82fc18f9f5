"""
Abuse report models
"""
from enum import Enum
from typing import Optional
from datetime import datetime

from app.models.profile import CamelModel


class ReportReason(str, Enum):
    SPAM = "spam"
    INAPPROPRIATE_CONTENT = "inappropriate-content"
    FAKE_PROFILE = "fake-profile"
    HARASSMENT = "harassment"
    OTHER = "other"


class ReportCategory(str, Enum):
    MESSAGE = "message"
    PROFILE = "profile"
    BEHAVIOUR = "behaviour"
    PHOTOS = "photos"


class ReportCreateRequest(CamelModel):
    reporting_user_id: Optional[str] = None
    reported_profile_id: Optional[str] = None
    reason: Optional[str] = None
    category: Optional[str] = None
    message: Optional[str] = None


class ReportResponse(CamelModel):
    id: str
    reporting_user_id: str
    reported_profile_id: str
    reason: ReportReason
    category: ReportCategory
    message: str
    created_at: datetime
