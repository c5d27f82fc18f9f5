"""
Collaborator dependencies - overridable through app.dependency_overrides
"""
from fastapi import Depends

from app.core.config import settings
from app.services.email_service import EmailService
from app.services.otp_service import OTPService
from app.services.razorpay_service import RazorpayService
from app.services.subscription_service import SubscriptionService


def get_mailer() -> EmailService:
    return EmailService(
        username=settings.EMAIL_USER,
        password=settings.EMAIL_PASS,
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT
    )


def get_payment_gateway() -> RazorpayService:
    return RazorpayService(
        key_id=settings.RAZORPAY_KEY_ID,
        key_secret=settings.RAZORPAY_SECRET,
        base_url=settings.RAZORPAY_BASE_URL
    )


def get_otp_service(mailer: EmailService = Depends(get_mailer)) -> OTPService:
    return OTPService(mailer)


def get_subscription_service(gateway: RazorpayService = Depends(get_payment_gateway)) -> SubscriptionService:
    return SubscriptionService(gateway)
