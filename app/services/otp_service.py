"""
OTP Service - issues and validates the email challenge that gates profile activation
"""
import logging
import secrets
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import DeliveryError, NotFoundError, ValidationError
from app.database.models import Profile
from app.services.email_service import EmailService, EmailDeliveryError
from app.utils.clock import utcnow, as_utc

logger = logging.getLogger(__name__)

OTP_LENGTH = 6


def generate_otp() -> str:
    """Six ASCII digits, never starting with zero"""
    return str(secrets.randbelow(9 * 10 ** (OTP_LENGTH - 1)) + 10 ** (OTP_LENGTH - 1))


def normalize_email(email: str) -> str:
    return email.strip().lower()


class OTPService:
    """Challenge issuer; the mail transport is injected so tests never touch SMTP"""

    def __init__(self, mailer: EmailService, ttl_minutes: int = None, subject: str = None):
        self.mailer = mailer
        self.ttl_minutes = ttl_minutes or settings.OTP_TTL_MINUTES
        self.subject = subject or settings.OTP_EMAIL_SUBJECT

    async def _store_challenge(self, db: AsyncSession, email: str, code: str) -> Profile:
        expires_at = utcnow() + timedelta(minutes=self.ttl_minutes)

        for attempt in range(2):
            result = await db.execute(select(Profile).where(Profile.email == email))
            profile = result.scalar_one_or_none()
            if profile is None:
                profile = Profile(email=email)
                db.add(profile)

            # Re-issuing a code never clears an earlier verification
            profile.otp_code = code
            profile.otp_expires_at = expires_at

            try:
                await db.commit()
                return profile
            except IntegrityError:
                # Concurrent request inserted the same email first; update that row instead
                await db.rollback()
                if attempt == 1:
                    raise

        return profile

    async def issue_challenge(self, db: AsyncSession, email: str) -> str:
        """Store a fresh code against the email (upserting a minimal record) and mail it"""
        normalized_email = normalize_email(email)
        code = generate_otp()

        await self._store_challenge(db, normalized_email, code)
        logger.info(f"OTP stored for {normalized_email}")

        # The stored code stays valid even if delivery fails
        try:
            await self.mailer.send_otp(normalized_email, code, self.subject, self.ttl_minutes)
        except EmailDeliveryError as e:
            logger.error(f"Error sending OTP to {normalized_email}: {e}")
            raise DeliveryError()

        return code

    async def verify_challenge(self, db: AsyncSession, email: str, code: str) -> Profile:
        normalized_email = normalize_email(email)
        result = await db.execute(select(Profile).where(Profile.email == normalized_email))
        profile = result.scalar_one_or_none()

        if profile is None:
            logger.warning(f"User not found for email: {normalized_email}")
            raise NotFoundError("User not found", code="not_found")

        if not profile.otp_code:
            logger.warning(f"No OTP found for email: {normalized_email}")
            raise ValidationError("No OTP found", code="no_challenge")

        if profile.otp_code != code:
            logger.warning(f"OTP mismatch for email: {normalized_email}")
            raise ValidationError("Invalid OTP", code="mismatch")

        # Accepted up to and including the expiry instant
        if utcnow() > as_utc(profile.otp_expires_at):
            logger.warning(f"OTP expired for email: {normalized_email}")
            raise ValidationError("Expired OTP", code="expired")

        profile.otp_verified = True
        await db.commit()
        logger.info(f"OTP verified successfully for {normalized_email}")
        return profile
