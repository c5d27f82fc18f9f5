"""
Profile Routes - signup completion, search, profile pages, partial updates and stats
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import logging

from app.core.exceptions import APIException, UpstreamError, ValidationError
from app.database.connection import get_db
from app.models.profile import (
    Gender, ProfileCreateRequest, ProfileCreateResponse, ProfileUpdateRequest,
    ProfileSummary, ProfileDetail, ProfileStats
)
from app.services.profile_service import profile_service
from app.utils.profile_formatting import to_summary, to_detail, to_account

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Profiles"])


@router.post("/create-profile", response_model=ProfileCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_profile(request: ProfileCreateRequest, db: AsyncSession = Depends(get_db)):
    """
    Complete (or resubmit) the profile of an OTP-verified email

    Every missing required field is reported at once in `missingFields`.
    """
    try:
        profile, created = await profile_service.create_or_complete_profile(db, request)
        return ProfileCreateResponse(
            message="Profile created successfully" if created else "Profile updated successfully",
            profile_id=profile.profile_id,
            email=profile.email,
            subscription=profile.subscription_tier
        )

    except APIException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error creating profile: {e}")
        raise UpstreamError("Failed to create profile")


@router.get("/profiles", response_model=List[ProfileSummary])
async def list_profiles(
    exclude_id: Optional[str] = Query(None, alias="excludeId", description="Profile ID to leave out"),
    gender: Optional[Gender] = Query(None, description="Only return profiles of this gender"),
    db: AsyncSession = Depends(get_db)
):
    try:
        profiles = await profile_service.list_verified_profiles(db, exclude_id=exclude_id, gender=gender)
        logger.info(f"Fetched {len(profiles)} profiles")
        return [to_summary(profile) for profile in profiles]

    except SQLAlchemyError as e:
        logger.error(f"Error fetching profiles: {e}")
        raise UpstreamError("Failed to fetch profiles")


@router.get("/recent-matches")
async def recent_matches(
    profile_id: str = Query(..., alias="profileId", min_length=1),
    gender: Gender = Query(..., description="Gender of the viewer; matches are of the opposite gender"),
    db: AsyncSession = Depends(get_db)
):
    try:
        profiles = await profile_service.list_recent_matches(db, profile_id, gender)
        return {"matches": [to_summary(profile).model_dump(by_alias=True) for profile in profiles]}

    except SQLAlchemyError as e:
        logger.error(f"Error fetching recent matches: {e}")
        raise UpstreamError()


@router.get("/profiles/{profile_id}", response_model=ProfileDetail)
async def get_profile(
    profile_id: str,
    viewer_id: Optional[str] = Query(None, alias="viewerId", description="Profile ID of the viewer"),
    db: AsyncSession = Depends(get_db)
):
    try:
        profile = await profile_service.view_profile(db, profile_id, viewer_id)
        return to_detail(profile)

    except APIException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error fetching profile {profile_id}: {e}")
        raise UpstreamError("Failed to fetch profile")


@router.get("/user-profile")
async def get_user_profile(
    email: Optional[str] = Query(None),
    profile_id: Optional[str] = Query(None, alias="profileId"),
    db: AsyncSession = Depends(get_db)
):
    if not email and not profile_id:
        raise ValidationError("Email or Profile ID is required")

    try:
        profile = await profile_service.get_account(db, email=email, profile_id=profile_id)
        history = await profile_service.get_subscription_history(db, profile)
        return {
            "success": True,
            "message": "Profile retrieved successfully",
            "user": to_account(profile, history).model_dump(by_alias=True, mode="json")
        }

    except APIException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error retrieving profile: {e}")
        raise UpstreamError("Failed to retrieve profile")


@router.put("/update-profile")
async def update_profile(request: ProfileUpdateRequest, db: AsyncSession = Depends(get_db)):
    try:
        profile = await profile_service.update_fields(db, request.profile_id, request.updated_data)
        return {
            "success": True,
            "message": "Profile updated successfully",
            "user": {
                "profileId": profile.profile_id,
                "name": profile.name,
                "email": profile.email
            }
        }

    except APIException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error updating profile: {e}")
        raise UpstreamError("Failed to update profile")


@router.get("/user/stats", response_model=ProfileStats)
async def get_user_stats(
    profile_id: str = Query(..., alias="profileId", min_length=1),
    db: AsyncSession = Depends(get_db)
):
    """Profile views, interests received and messages received"""
    try:
        return await profile_service.get_stats(db, profile_id)

    except APIException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error fetching user stats: {e}")
        raise UpstreamError("Failed to fetch user stats")
