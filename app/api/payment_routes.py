"""
Payment Routes - Razorpay checkout initiation and verification
"""
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.api.dependencies import get_subscription_service
from app.core.exceptions import APIException, UpstreamError
from app.database.connection import get_db
from app.models.payments import InitiateCheckoutRequest, VerifyCheckoutRequest
from app.services.subscription_service import SubscriptionService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/payment", tags=["Payments"])


@router.post("/initiate")
async def initiate_payment(
    request: InitiateCheckoutRequest,
    subscription_service: SubscriptionService = Depends(get_subscription_service),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a gateway order for a paid plan

    - **plan**: premium or premium_plus
    - **price**: positive whole-rupee amount
    - **userId**: external profile ID of the buyer
    """
    try:
        order, payment = await subscription_service.initiate_checkout(
            db, request.user_id, request.plan, request.price
        )
        return {"success": True, "order": order, "paymentId": str(payment.id)}

    except APIException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Payment initiation error: {e}")
        raise UpstreamError("Payment initiation failed")


@router.post("/verify")
async def verify_payment(
    request: VerifyCheckoutRequest,
    subscription_service: SubscriptionService = Depends(get_subscription_service),
    db: AsyncSession = Depends(get_db)
):
    """Check the checkout signature, mark the order paid and upgrade the subscription"""
    try:
        payment, profile = await subscription_service.verify_checkout(
            db,
            request.razorpay_order_id,
            request.razorpay_payment_id,
            request.razorpay_signature,
            request.payment_id
        )
        return {
            "success": True,
            "message": "Payment verified and subscription updated",
            "subscription": {
                "current": profile.subscription_tier,
                "paymentId": str(payment.id)
            }
        }

    except APIException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Payment verification error: {e}")
        raise UpstreamError("Verification failed")
