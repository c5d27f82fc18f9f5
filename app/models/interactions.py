"""
Pydantic models for interest / pass signalling
"""
from pydantic import Field
from enum import Enum

from app.models.profile import CamelModel


class InteractionKind(str, Enum):
    INTERESTED = "interested"
    PASSED = "passed"


class SendInterestRequest(CamelModel):
    user_profile_id: str = Field(..., min_length=1)
    interested_profile_id: str = Field(..., min_length=1)


class PassProfileRequest(CamelModel):
    user_profile_id: str = Field(..., min_length=1)
    passed_profile_id: str = Field(..., min_length=1)


class RemoveAllInterestsRequest(CamelModel):
    user_profile_id: str = Field(..., min_length=1)
