"""
Interest Routes - send / remove interests, pass on profiles, list both sets
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from app.core.exceptions import APIException, UpstreamError
from app.database.connection import get_db
from app.models.interactions import SendInterestRequest, PassProfileRequest, RemoveAllInterestsRequest
from app.models.profile import ProfileSummary
from app.services.interaction_service import interaction_service
from app.utils.profile_formatting import to_summary

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Interests"])

# =============================================================================
# INTERESTS
# =============================================================================

@router.post("/send-interest")
async def send_interest(request: SendInterestRequest, db: AsyncSession = Depends(get_db)):
    """Add a profile to the sender's interested set; sending twice is a no-op"""
    try:
        await interaction_service.send_interest(db, request.user_profile_id, request.interested_profile_id)
        return {"success": True, "message": "Interest sent successfully"}

    except APIException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error storing interest: {e}")
        raise UpstreamError("Failed to send interest")


@router.delete("/remove-interest")
async def remove_interest(request: SendInterestRequest, db: AsyncSession = Depends(get_db)):
    try:
        await interaction_service.remove_interest(db, request.user_profile_id, request.interested_profile_id)
        return {"success": True, "message": "Interest removed successfully"}

    except APIException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error removing interest: {e}")
        raise UpstreamError("Failed to remove interest")


@router.delete("/remove-all-interests")
async def remove_all_interests(request: RemoveAllInterestsRequest, db: AsyncSession = Depends(get_db)):
    try:
        removed = await interaction_service.remove_all_interests(db, request.user_profile_id)
        return {
            "success": True,
            "message": "All interests removed successfully",
            "modifiedCount": removed
        }

    except SQLAlchemyError as e:
        logger.error(f"Error removing all interests: {e}")
        raise UpstreamError("Failed to remove all interests")


@router.get("/interested-profiles", response_model=List[ProfileSummary])
async def interested_profiles(
    user_profile_id: str = Query(..., alias="userProfileId", min_length=1),
    db: AsyncSession = Depends(get_db)
):
    try:
        profiles = await interaction_service.list_interested(db, user_profile_id)
        return [to_summary(profile) for profile in profiles]

    except SQLAlchemyError as e:
        logger.error(f"Error fetching interested profiles: {e}")
        raise UpstreamError("Failed to fetch interested profiles")

# =============================================================================
# PASSES
# =============================================================================

@router.post("/pass-profile")
async def pass_profile(request: PassProfileRequest, db: AsyncSession = Depends(get_db)):
    """Add a profile to the sender's passed set; there is no operation to undo a pass"""
    try:
        await interaction_service.pass_profile(db, request.user_profile_id, request.passed_profile_id)
        return {"success": True, "message": "Profile passed successfully"}

    except APIException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error storing pass: {e}")
        raise UpstreamError("Failed to pass profile")


@router.get("/passed-profiles", response_model=List[ProfileSummary])
async def passed_profiles(
    user_profile_id: str = Query(..., alias="userProfileId", min_length=1),
    db: AsyncSession = Depends(get_db)
):
    try:
        profiles = await interaction_service.list_passed(db, user_profile_id)
        return [to_summary(profile) for profile in profiles]

    except SQLAlchemyError as e:
        logger.error(f"Error fetching passed profiles: {e}")
        raise UpstreamError("Failed to fetch passed profiles")
