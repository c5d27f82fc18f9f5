"""
Auth Routes - OTP email verification and login
"""
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.api.dependencies import get_otp_service
from app.core.exceptions import APIException, UpstreamError
from app.database.connection import get_db
from app.models.profile import SendOTPRequest, VerifyOTPRequest, LoginRequest
from app.services.otp_service import OTPService
from app.services.profile_service import profile_service
from app.utils.profile_formatting import to_account

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Authentication"])


@router.post("/send-email-otp")
async def send_email_otp(
    request: SendOTPRequest,
    otp_service: OTPService = Depends(get_otp_service),
    db: AsyncSession = Depends(get_db)
):
    """Issue a 6-digit code valid for 10 minutes and email it"""
    try:
        await otp_service.issue_challenge(db, request.email)
        return {"success": True, "message": "OTP sent successfully"}

    except APIException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error storing OTP for {request.email}: {e}")
        raise UpstreamError("Failed to send OTP")


@router.post("/verify-email-otp")
async def verify_email_otp(
    request: VerifyOTPRequest,
    otp_service: OTPService = Depends(get_otp_service),
    db: AsyncSession = Depends(get_db)
):
    try:
        await otp_service.verify_challenge(db, request.email, request.otp)
        return {"success": True, "message": "OTP verified successfully"}

    except APIException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error verifying OTP: {e}")
        raise UpstreamError("Failed to verify OTP")


@router.post("/login")
async def login(request: LoginRequest, db: AsyncSession = Depends(get_db)):
    try:
        profile = await profile_service.authenticate(db, request.email, request.password)
        history = await profile_service.get_subscription_history(db, profile)
        return {
            "success": True,
            "message": "Login successful",
            "user": to_account(profile, history).model_dump(by_alias=True, mode="json")
        }

    except APIException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error during login: {e}")
        raise UpstreamError("Failed to login")
