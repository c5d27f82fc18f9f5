"""
Profile Service - account directory: signup completion, login, lookup, partial update, search
"""
import logging
import uuid
from typing import List, Optional, Tuple

from passlib.context import CryptContext
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import AuthError, ConflictError, MissingFieldsError, NotFoundError, ValidationError
from app.database.models import Profile, ProfileInteraction, SubscriptionPeriod, Message
from app.models.interactions import InteractionKind
from app.models.payments import SubscriptionTier
from app.models.profile import Gender, ProfileCreateRequest, ProfileFieldsUpdate, ProfileStats
from app.services.otp_service import normalize_email
from app.utils.clock import utcnow, epoch_millis

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# bcrypt only hashes the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72

# (section, field, name reported to the caller) - all checked in one pass
REQUIRED_PROFILE_FIELDS: Tuple[Tuple[str, str, str], ...] = (
    ("personal_info", "email", "personalInfo.email"),
    ("personal_info", "name", "personalInfo.name"),
    ("personal_info", "mobile", "personalInfo.mobile"),
    ("personal_info", "gender", "personalInfo.gender"),
    ("personal_info", "looking_for", "personalInfo.lookingFor"),
    ("demographics", "date_of_birth", "demographics.dateOfBirth"),
    ("demographics", "height", "demographics.height"),
    ("demographics", "marital_status", "demographics.maritalStatus"),
    ("demographics", "religion", "demographics.religion"),
    ("demographics", "community", "demographics.community"),
    ("demographics", "mother_tongue", "demographics.motherTongue"),
    ("professional_info", "education", "professionalInfo.education"),
    ("professional_info", "occupation", "professionalInfo.occupation"),
    ("professional_info", "income", "professionalInfo.income"),
    ("location", "city", "location.city"),
    ("location", "state", "location.state"),
    ("credentials", "password", "credentials.password"),
)


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def find_missing_fields(data: ProfileCreateRequest) -> List[str]:
    """Every required field that is absent or blank, in declaration order"""
    missing = []
    for section, field, name in REQUIRED_PROFILE_FIELDS:
        value = getattr(getattr(data, section), field, None)
        if _is_blank(value):
            missing.append(name)
    return missing


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


class ProfileService:
    """Service class for the account directory"""

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[Profile]:
        result = await db.execute(select(Profile).where(Profile.email == normalize_email(email)))
        return result.scalar_one_or_none()

    async def get_by_profile_id(self, db: AsyncSession, profile_id: str) -> Optional[Profile]:
        result = await db.execute(select(Profile).where(Profile.profile_id == profile_id))
        return result.scalar_one_or_none()

    async def get_by_reference(self, db: AsyncSession, reference: str) -> Optional[Profile]:
        """Resolve an internal UUID or, failing that, an external profile id"""
        try:
            internal_id = uuid.UUID(str(reference))
        except ValueError:
            return await self.get_by_profile_id(db, reference)
        return await db.get(Profile, internal_id)

    async def get_subscription_history(self, db: AsyncSession, profile: Profile) -> List[SubscriptionPeriod]:
        result = await db.execute(
            select(SubscriptionPeriod)
            .where(SubscriptionPeriod.profile_ref == profile.id)
            .order_by(SubscriptionPeriod.upgraded_at)
        )
        return list(result.scalars().all())

    async def _next_profile_id(self, db: AsyncSession) -> str:
        """KM<epoch-ms> of the creation instant, bumped past any identifier already taken"""
        stamp = epoch_millis(utcnow())
        while True:
            candidate = f"KM{stamp}"
            taken = await db.scalar(select(Profile.id).where(Profile.profile_id == candidate))
            if taken is None:
                return candidate
            stamp += 1

    # =========================================================================
    # SIGNUP COMPLETION
    # =========================================================================

    async def create_or_complete_profile(self, db: AsyncSession, data: ProfileCreateRequest) -> Tuple[Profile, bool]:
        """
        Complete the signup of an OTP-verified email.

        All profile sections are replaced with the submitted data; the
        external identifier and the subscription state survive resubmission.
        Returns the profile and whether this submission completed it.
        """
        missing_fields = find_missing_fields(data)
        if missing_fields:
            logger.warning(f"Missing required fields in profile data: {missing_fields}")
            raise MissingFieldsError(missing_fields)

        if len(data.credentials.password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            logger.warning("Rejected password longer than the bcrypt limit")
            raise ValidationError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes", code="password_too_long"
            )

        normalized_email = normalize_email(data.personal_info.email)
        profile = await self.get_by_email(db, normalized_email)

        if profile is None or not profile.otp_verified:
            logger.warning(f"Email not verified for {normalized_email}")
            raise AuthError("Email not verified", code="email_not_verified")

        now = utcnow()
        personal = data.personal_info
        demographics = data.demographics
        professional = data.professional_info

        profile.name = personal.name
        profile.mobile = personal.mobile
        profile.gender = personal.gender.value
        profile.looking_for = personal.looking_for
        profile.hobbies = personal.hobbies
        profile.about = personal.about
        profile.profile_image = personal.profile_image
        profile.last_active = now

        profile.date_of_birth = demographics.date_of_birth
        profile.height = demographics.height
        profile.marital_status = demographics.marital_status
        profile.religion = demographics.religion
        profile.community = demographics.community
        profile.mother_tongue = demographics.mother_tongue
        profile.has_horoscope = bool(demographics.horoscope)

        profile.education = professional.education
        profile.occupation = professional.occupation
        profile.income = professional.income

        profile.city = data.location.city
        profile.state = data.location.state

        profile.family_father = data.family.father
        profile.family_mother = data.family.mother
        profile.family_siblings = data.family.siblings

        profile.password_hash = hash_password(data.credentials.password)
        profile.remember_me = bool(data.credentials.remember_me)
        profile.app_version = data.app_version

        if not profile.subscription_tier:
            profile.subscription_tier = SubscriptionTier.FREE.value
        if profile.subscription_start is None:
            profile.subscription_start = now
        if profile.profile_created_at is None:
            profile.profile_created_at = now
        if not profile.profile_id:
            profile.profile_id = await self._next_profile_id(db)

        created = not profile.is_complete
        profile.is_complete = True

        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.warning(f"Duplicate profile for {normalized_email}: {e}")
            raise ConflictError("Email already exists", code="duplicate_email")

        logger.info(
            f"Profile {'created' if created else 'updated'}: {profile.profile_id} "
            f"({normalized_email}, subscription={profile.subscription_tier})"
        )
        return profile, created

    # =========================================================================
    # LOGIN
    # =========================================================================

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> Profile:
        normalized_email = normalize_email(email)
        profile = await self.get_by_email(db, normalized_email)

        if profile is None:
            logger.warning(f"User not found for email: {normalized_email}")
            raise NotFoundError("User not found", code="not_found")

        if not profile.otp_verified:
            logger.warning(f"Email not verified for {normalized_email}")
            raise AuthError("Email not verified", code="not_verified")

        if not profile.password_hash:
            logger.warning(f"No password set for {normalized_email}")
            raise AuthError("No password set for this account", code="no_credential")

        if not verify_password(password, profile.password_hash):
            logger.warning(f"Invalid password for {normalized_email}")
            raise AuthError("Invalid password", code="bad_password")

        profile.last_active = utcnow()
        await db.commit()
        logger.info(f"Login successful for {normalized_email}")
        return profile

    # =========================================================================
    # PARTIAL UPDATE
    # =========================================================================

    async def update_fields(self, db: AsyncSession, profile_id: str, updated: ProfileFieldsUpdate) -> Profile:
        """Merge only the supplied, non-empty fields; required-field validation does not apply"""
        profile = await self.get_by_profile_id(db, profile_id)
        if profile is None:
            raise NotFoundError("Profile not found", code="not_found")

        changes = {
            "name": updated.name,
            "height": updated.height,
            "occupation": updated.occupation,
            "education": updated.education,
            "religion": updated.religion,
            "community": updated.community,
            "mother_tongue": updated.mother_tongue,
            "hobbies": updated.hobbies,
        }
        if updated.family is not None:
            changes["family_father"] = updated.family.father
            changes["family_mother"] = updated.family.mother

        applied = []
        for column, value in changes.items():
            if _is_blank(value):
                continue
            setattr(profile, column, value)
            applied.append(column)

        await db.commit()
        logger.info(f"Profile updated for {profile_id}: {applied}")
        return profile

    # =========================================================================
    # SEARCH & VIEWS
    # =========================================================================

    async def list_verified_profiles(
        self,
        db: AsyncSession,
        exclude_id: Optional[str] = None,
        gender: Optional[Gender] = None,
        limit: Optional[int] = None,
        newest_first: bool = False
    ) -> List[Profile]:
        """Verified, completed profiles, optionally excluding one id and filtered to a gender"""
        query = select(Profile).where(
            Profile.otp_verified.is_(True),
            Profile.is_complete.is_(True),
            Profile.profile_id.is_not(None)
        )
        if exclude_id:
            query = query.where(Profile.profile_id != exclude_id)
        if gender is not None:
            query = query.where(Profile.gender == gender.value)
        if newest_first:
            query = query.order_by(Profile.profile_created_at.desc())
        if limit:
            query = query.limit(limit)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def list_recent_matches(self, db: AsyncSession, profile_id: str, viewer_gender: Gender) -> List[Profile]:
        return await self.list_verified_profiles(
            db,
            exclude_id=profile_id,
            gender=viewer_gender.opposite,
            limit=settings.RECENT_MATCHES_LIMIT,
            newest_first=True
        )

    async def view_profile(self, db: AsyncSession, profile_id: str, viewer_id: Optional[str] = None) -> Profile:
        """Fetch a profile page; a view by another profile bumps the view counter"""
        profile = await self.get_by_profile_id(db, profile_id)
        if profile is None:
            raise NotFoundError("Profile not found", code="not_found")

        if viewer_id and viewer_id != profile_id:
            profile.profile_views = (profile.profile_views or 0) + 1
            await db.commit()

        return profile

    async def get_account(self, db: AsyncSession, email: Optional[str] = None,
                          profile_id: Optional[str] = None) -> Profile:
        if profile_id:
            profile = await self.get_by_profile_id(db, profile_id)
        else:
            profile = await self.get_by_email(db, email)

        if profile is None:
            raise NotFoundError("User not found", code="not_found")
        if not profile.otp_verified:
            raise AuthError("Email not verified", code="not_verified")
        return profile

    async def get_stats(self, db: AsyncSession, profile_id: str) -> ProfileStats:
        profile = await self.get_by_profile_id(db, profile_id)
        if profile is None:
            logger.warning(f"User not found for profileId: {profile_id}")
            raise NotFoundError("User not found", code="not_found")

        interests_received = await db.scalar(
            select(func.count(ProfileInteraction.id)).where(
                ProfileInteraction.target_profile_id == profile_id,
                ProfileInteraction.kind == InteractionKind.INTERESTED.value
            )
        )
        messages_received = await db.scalar(
            select(func.count(Message.id)).where(Message.recipient_profile_id == profile_id)
        )

        return ProfileStats(
            profile_views=profile.profile_views or 0,
            interests_received=interests_received or 0,
            messages=messages_received or 0,
        )


profile_service = ProfileService()
