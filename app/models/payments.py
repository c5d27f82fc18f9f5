"""
Subscription tiers and payment checkout models
"""
from enum import Enum
from typing import Dict, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class SubscriptionTier(str, Enum):
    """Subscription tiers"""
    FREE = "free"                   # Default for every completed profile
    PREMIUM = "premium"             # 90 days per payment
    PREMIUM_PLUS = "premium_plus"   # 180 days per payment


class PaymentStatus(str, Enum):
    CREATED = "created"
    PAID = "paid"
    FAILED = "failed"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


# Entitlement window granted by one verified payment
PLAN_DURATION_DAYS: Dict[SubscriptionTier, int] = {
    SubscriptionTier.PREMIUM: 90,
    SubscriptionTier.PREMIUM_PLUS: 180,
}


class InitiateCheckoutRequest(BaseModel):
    """Checkout request; presence and range checks happen in the service"""
    plan: Optional[str] = None
    price: Optional[Union[int, float, str]] = None
    user_id: Optional[str] = Field(None, alias="userId")

    model_config = ConfigDict(populate_by_name=True)


class VerifyCheckoutRequest(BaseModel):
    """Fields posted back by the Razorpay checkout widget"""
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_signature: Optional[str] = None
    payment_id: Optional[str] = Field(None, alias="paymentId")

    model_config = ConfigDict(populate_by_name=True)
