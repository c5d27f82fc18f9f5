"""
Subscription Service - payment checkout and the entitlement it grants

Verification writes the paid order, the profile's current subscription and
the new history entry in one transaction, so a failure leaves none of them
changed.
"""
import logging
import uuid
from datetime import timedelta
from typing import Any, Dict, Optional, Tuple, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import GatewayError, MissingFieldsError, NotFoundError, SignatureError, ValidationError
from app.database.models import PaymentOrder, Profile, SubscriptionPeriod
from app.models.payments import PLAN_DURATION_DAYS, PaymentStatus, SubscriptionStatus, SubscriptionTier
from app.services.profile_service import profile_service
from app.services.razorpay_service import RazorpayService, PaymentGatewayError
from app.utils.clock import utcnow, epoch_millis

logger = logging.getLogger(__name__)

PAID_TIERS = tuple(PLAN_DURATION_DAYS)


def normalize_plan(plan: str) -> Optional[SubscriptionTier]:
    """Map 'premium', 'Premium Plus', 'premium_plus' ... onto a paid tier"""
    key = "_".join(plan.strip().lower().replace("-", " ").replace("_", " ").split())
    try:
        tier = SubscriptionTier(key)
    except ValueError:
        return None
    return tier if tier in PAID_TIERS else None


def parse_price(price: Union[int, float, str]) -> Optional[int]:
    """Positive whole-rupee price, or None; fractional amounts are rejected"""
    if isinstance(price, bool):
        return None
    if isinstance(price, int):
        value = price
    elif isinstance(price, float):
        if not price.is_integer():
            return None
        value = int(price)
    else:
        try:
            value = int(str(price).strip())
        except ValueError:
            return None
    return value if value > 0 else None


def _missing(**fields) -> list:
    return [name for name, value in fields.items() if value is None or (isinstance(value, str) and not value.strip())]


class SubscriptionService:
    """Checkout flow; the gateway client is injected"""

    def __init__(self, gateway: RazorpayService, currency: str = None):
        self.gateway = gateway
        self.currency = currency or settings.PAYMENT_CURRENCY

    async def initiate_checkout(
        self,
        db: AsyncSession,
        profile_id: Optional[str],
        plan: Optional[str],
        price: Optional[Union[int, float, str]]
    ) -> Tuple[Dict[str, Any], PaymentOrder]:
        missing = _missing(plan=plan, price=price, userId=profile_id)
        if missing:
            logger.warning(f"Missing required fields: {missing}")
            raise MissingFieldsError(missing, "Missing required fields: plan, price, and userId are required")

        tier = normalize_plan(plan)
        if tier is None:
            logger.warning(f"Invalid plan: {plan}")
            raise ValidationError("Invalid plan specified", code="invalid_plan")

        amount = parse_price(price)
        if amount is None:
            logger.warning(f"Invalid price: {price}")
            raise ValidationError("Invalid price value", code="invalid_price")

        profile = await profile_service.get_by_profile_id(db, profile_id)
        if profile is None:
            logger.warning(f"User not found for profileId: {profile_id}")
            raise NotFoundError("User not found", code="profile_not_found")

        try:
            order = await self.gateway.create_order(
                amount=amount * 100,  # paise
                currency=self.currency,
                receipt=f"receipt_{epoch_millis(utcnow())}"
            )
        except PaymentGatewayError as e:
            logger.error(f"Payment initiation error: {e}")
            raise GatewayError()

        payment = PaymentOrder(
            profile_ref=profile.id,
            plan=tier.value,
            price=amount,
            gateway_order_id=order.get("id"),
            status=PaymentStatus.CREATED.value
        )
        db.add(payment)
        await db.commit()

        logger.info(f"Payment order {payment.id} created for {profile_id}: {tier.value} at {amount}")
        return order, payment

    async def _load_payment_for_update(self, db: AsyncSession, order_id: str) -> Optional[PaymentOrder]:
        """Fetch the order row locked until the end of the transaction"""
        try:
            payment_uuid = uuid.UUID(str(order_id))
        except ValueError:
            return None

        result = await db.execute(
            select(PaymentOrder)
            .where(PaymentOrder.id == payment_uuid)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def verify_checkout(
        self,
        db: AsyncSession,
        gateway_order_id: Optional[str],
        gateway_payment_id: Optional[str],
        gateway_signature: Optional[str],
        order_id: Optional[str]
    ) -> Tuple[PaymentOrder, Profile]:
        missing = _missing(
            razorpay_order_id=gateway_order_id,
            razorpay_payment_id=gateway_payment_id,
            razorpay_signature=gateway_signature,
            paymentId=order_id
        )
        if missing:
            logger.warning(f"Missing verification fields: {missing}")
            raise MissingFieldsError(missing, "Missing required verification fields")

        if not self.gateway.verify_signature(gateway_order_id, gateway_payment_id, gateway_signature):
            logger.warning(f"Invalid signature received for gateway order {gateway_order_id}")
            raise SignatureError()

        payment = await self._load_payment_for_update(db, order_id)
        if payment is None:
            logger.warning(f"Payment not found: {order_id}")
            raise NotFoundError("Payment not found", code="order_not_found")

        # The signature only vouches for the gateway order it was computed over
        if payment.gateway_order_id != gateway_order_id:
            logger.warning(f"Signature for {gateway_order_id} does not belong to payment {order_id}")
            raise SignatureError()

        profile = await db.get(Profile, payment.profile_ref)
        if profile is None:
            logger.warning(f"User not found for payment: {payment.profile_ref}")
            raise NotFoundError("User not found", code="profile_not_found")

        if payment.status == PaymentStatus.PAID.value:
            logger.info(f"Payment {order_id} already verified")
            return payment, profile

        tier = SubscriptionTier(payment.plan)
        now = utcnow()
        expiry = now + timedelta(days=PLAN_DURATION_DAYS[tier])

        payment.gateway_payment_id = gateway_payment_id
        payment.gateway_signature = gateway_signature
        payment.status = PaymentStatus.PAID.value

        profile.subscription_tier = tier.value
        profile.subscription_start = now
        profile.subscription_expiry = expiry
        profile.subscription_payment_id = payment.id
        profile.subscription_auto_renew = False

        db.add(SubscriptionPeriod(
            profile_ref=profile.id,
            tier=tier.value,
            start_date=now,
            expiry_date=expiry,
            payment_order_id=payment.id,
            status=SubscriptionStatus.ACTIVE.value,
            auto_renew=False,
            upgraded_at=now
        ))

        payment_id, profile_ref = payment.id, profile.id
        try:
            await db.commit()
        except IntegrityError:
            # A concurrent verification recorded this order's history entry first
            await db.rollback()
            payment = await db.get(PaymentOrder, payment_id, populate_existing=True)
            profile = await db.get(Profile, profile_ref, populate_existing=True)
            if payment is None or payment.status != PaymentStatus.PAID.value:
                raise
            logger.info(f"Payment {order_id} was verified concurrently")
            return payment, profile

        logger.info(f"Payment {order_id} verified; {profile.profile_id} upgraded to {tier.value} until {expiry.isoformat()}")
        return payment, profile
