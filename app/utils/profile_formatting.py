"""
Profile display helpers - age derivation and response shaping
"""
from datetime import date
from typing import Optional

from app.core.config import settings
from app.database.models import Profile, SubscriptionPeriod
from app.models.profile import (
    ProfileSummary, ProfileDetail, FamilyView, AccountView,
    SubscriptionView, SubscriptionPeriodView
)
from app.utils.clock import as_utc, utcnow

DETAIL_PLACEHOLDER_IMAGE = "https://via.placeholder.com/300"
DEFAULT_PREFERENCES = (
    "Age: Not specified",
    "Education: Not specified",
    "Profession: Not specified",
    "Location: Not specified",
)


def parse_birth_date(value: Optional[str]) -> Optional[date]:
    """Parse a stored date of birth (ISO date or datetime string)"""
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def age_from_birth_year(date_of_birth: Optional[str], today: Optional[date] = None) -> Optional[int]:
    """
    Whole-year age used on listing cards: current year minus birth year.

    Deliberately ignores month and day, so 2000-06-15 is 24 on 2024-01-01.
    """
    born = parse_birth_date(date_of_birth)
    if born is None:
        return None
    today = today or utcnow().date()
    return today.year - born.year


def exact_age(date_of_birth: Optional[str], today: Optional[date] = None) -> Optional[int]:
    """Age in elapsed years (365.25-day years), used on the full profile page"""
    born = parse_birth_date(date_of_birth)
    if born is None:
        return None
    today = today or utcnow().date()
    return int((today - born).days // 365.25)


def to_summary(profile: Profile, today: Optional[date] = None) -> ProfileSummary:
    return ProfileSummary(
        id=profile.profile_id,
        name=profile.name,
        age=age_from_birth_year(profile.date_of_birth, today),
        profession=profile.occupation,
        location=profile.city,
        education=profile.education,
        community=profile.community,
        income=profile.income,
        horoscope=bool(profile.has_horoscope),
        image=profile.profile_image or settings.PLACEHOLDER_IMAGE_URL,
    )


def to_detail(profile: Profile, today: Optional[date] = None) -> ProfileDetail:
    if profile.city or profile.state:
        location = ", ".join(part for part in (profile.city, profile.state) if part)
    else:
        location = "Unknown"

    return ProfileDetail(
        id=profile.profile_id,
        name=profile.name or "Unknown",
        age=exact_age(profile.date_of_birth, today),
        profession=profile.occupation or "Unknown",
        location=location,
        education=profile.education or "Unknown",
        salary=profile.income or "Not specified",
        height=profile.height or "Unknown",
        community=profile.community or "Unknown",
        mother_tongue=profile.mother_tongue or "Unknown",
        caste=profile.community or "Not specified",
        religion=profile.religion or "Not specified",
        hobbies_and_interests=profile.hobbies or "Not specified",
        images=[profile.profile_image] if profile.profile_image else [DETAIL_PLACEHOLDER_IMAGE],
        about=profile.about or "No description provided.",
        family=FamilyView(
            father=profile.family_father or "Not specified",
            mother=profile.family_mother or "Not specified",
            siblings=profile.family_siblings or "None",
        ),
        preferences=list(DEFAULT_PREFERENCES),
        profile_views=profile.profile_views or 0,
    )


def _period_view(period: SubscriptionPeriod) -> SubscriptionPeriodView:
    return SubscriptionPeriodView(
        type=period.tier,
        start_date=as_utc(period.start_date),
        expiry_date=as_utc(period.expiry_date),
        payment_id=str(period.payment_order_id) if period.payment_order_id else None,
        status=period.status,
        auto_renew=period.auto_renew,
        upgraded_at=as_utc(period.upgraded_at),
    )


def subscription_view(profile: Profile, history=()) -> SubscriptionView:
    start = as_utc(profile.subscription_start)
    expiry = as_utc(profile.subscription_expiry)
    return SubscriptionView(
        current=profile.subscription_tier,
        details={
            "startDate": start.isoformat() if start else None,
            "expiryDate": expiry.isoformat() if expiry else None,
            "paymentId": str(profile.subscription_payment_id) if profile.subscription_payment_id else None,
            "autoRenew": profile.subscription_auto_renew,
        },
        history=[_period_view(period) for period in history],
    )


def to_account(profile: Profile, history=()) -> AccountView:
    return AccountView(
        profile_id=profile.profile_id,
        name=profile.name,
        email=profile.email,
        mobile=profile.mobile,
        gender=profile.gender,
        looking_for=profile.looking_for,
        last_active=as_utc(profile.last_active),
        date_of_birth=profile.date_of_birth,
        height=profile.height,
        marital_status=profile.marital_status,
        religion=profile.religion,
        community=profile.community,
        mother_tongue=profile.mother_tongue,
        education=profile.education,
        occupation=profile.occupation,
        income=profile.income,
        city=profile.city,
        state=profile.state,
        subscription=subscription_view(profile, history),
        profile_created_at=as_utc(profile.profile_created_at),
        app_version=profile.app_version,
    )
