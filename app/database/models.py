"""
Matrimony database models
Profiles, subscription history, interactions, payment orders, abuse reports and messages
"""
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Text, ForeignKey, Index, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func
import uuid as uuid_lib

Base = declarative_base()

# =============================================================================
# ACCOUNT DIRECTORY
# =============================================================================

class Profile(Base):
    """One matrimony listing; starts as a minimal OTP record and is completed once"""
    __tablename__ = "profiles"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid_lib.uuid4)
    profile_id = Column(String(32), unique=True, nullable=True, index=True)  # KM<epoch-ms>, assigned on completion
    email = Column(String(255), nullable=False, unique=True, index=True)  # always lower-cased

    # Personal info
    name = Column(Text)
    gender = Column(String(10))
    looking_for = Column(String(20))
    mobile = Column(String(32))
    hobbies = Column(Text)
    about = Column(Text)
    profile_image = Column(Text)
    last_active = Column(DateTime(timezone=True))

    # Family
    family_father = Column(Text)
    family_mother = Column(Text)
    family_siblings = Column(Text)

    # Demographics
    date_of_birth = Column(String(32))
    height = Column(String(32))
    marital_status = Column(String(64))
    religion = Column(String(64))
    community = Column(String(64))
    mother_tongue = Column(String(64))
    has_horoscope = Column(Boolean, nullable=False, default=False)

    # Professional info
    education = Column(Text)
    occupation = Column(Text)
    income = Column(String(64))

    # Location
    city = Column(String(128))
    state = Column(String(128))

    # Credentials
    password_hash = Column(String(255))
    remember_me = Column(Boolean, nullable=False, default=False)

    # Current subscription
    subscription_tier = Column(String(20), nullable=False, default="free")
    subscription_start = Column(DateTime(timezone=True))
    subscription_expiry = Column(DateTime(timezone=True))
    subscription_payment_id = Column(Uuid(as_uuid=True))
    subscription_auto_renew = Column(Boolean, nullable=False, default=False)

    # OTP challenge
    otp_code = Column(String(6))
    otp_expires_at = Column(DateTime(timezone=True))
    otp_verified = Column(Boolean, nullable=False, default=False)

    # Lifecycle
    is_complete = Column(Boolean, nullable=False, default=False)
    app_version = Column(String(32))
    profile_views = Column(Integer, nullable=False, default=0)
    profile_created_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    subscription_history = relationship(
        "SubscriptionPeriod",
        back_populates="profile",
        cascade="all, delete-orphan",
        order_by="SubscriptionPeriod.upgraded_at",
    )
    payment_orders = relationship("PaymentOrder", back_populates="profile")

    __table_args__ = (
        CheckConstraint("gender IS NULL OR gender IN ('male', 'female')", name="ck_profiles_gender"),
        CheckConstraint("subscription_tier IN ('free', 'premium', 'premium_plus')", name="ck_profiles_subscription_tier"),
        Index('idx_profiles_verified_gender', 'otp_verified', 'gender'),
        Index('idx_profiles_created_at', 'profile_created_at'),
    )


class SubscriptionPeriod(Base):
    """Append-only subscription history entry"""
    __tablename__ = "subscription_periods"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid_lib.uuid4)
    profile_ref = Column(Uuid(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    tier = Column(String(20), nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False)
    expiry_date = Column(DateTime(timezone=True))
    payment_order_id = Column(Uuid(as_uuid=True), ForeignKey("payment_orders.id"))
    status = Column(String(20), nullable=False, default="active")
    auto_renew = Column(Boolean, nullable=False, default=False)
    upgraded_at = Column(DateTime(timezone=True), nullable=False)

    profile = relationship("Profile", back_populates="subscription_history")

    __table_args__ = (
        CheckConstraint("status IN ('active', 'expired', 'cancelled')", name="ck_subscription_periods_status"),
        UniqueConstraint('payment_order_id', name='uq_subscription_periods_payment_order'),
    )

# =============================================================================
# INTERACTION LEDGER
# =============================================================================

class ProfileInteraction(Base):
    """Membership of a target profile in an owner's interested or passed set"""
    __tablename__ = "profile_interactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_profile_id = Column(String(32), nullable=False)
    target_profile_id = Column(String(32), nullable=False)
    kind = Column(String(16), nullable=False)  # interested | passed
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint('owner_profile_id', 'target_profile_id', 'kind', name='uq_profile_interactions_member'),
        CheckConstraint("kind IN ('interested', 'passed')", name="ck_profile_interactions_kind"),
        Index('idx_profile_interactions_owner_kind', 'owner_profile_id', 'kind'),
        Index('idx_profile_interactions_target_kind', 'target_profile_id', 'kind'),
    )

# =============================================================================
# SUBSCRIPTION LEDGER
# =============================================================================

class PaymentOrder(Base):
    """One checkout attempt against the payment gateway"""
    __tablename__ = "payment_orders"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid_lib.uuid4)
    profile_ref = Column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False, index=True)
    plan = Column(String(20), nullable=False)
    price = Column(Integer, nullable=False)
    gateway_order_id = Column(String(64), index=True)
    gateway_payment_id = Column(String(64))
    gateway_signature = Column(String(128))
    status = Column(String(16), nullable=False, default="created")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    profile = relationship("Profile", back_populates="payment_orders")

    __table_args__ = (
        CheckConstraint("status IN ('created', 'paid', 'failed')", name="ck_payment_orders_status"),
    )

# =============================================================================
# ABUSE REPORTS & MESSAGES
# =============================================================================

class AbuseReport(Base):
    """User-submitted complaint; rows are never updated"""
    __tablename__ = "abuse_reports"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid_lib.uuid4)
    reporting_user_id = Column(Text, nullable=False)
    reported_profile_ref = Column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False, index=True)
    reason = Column(String(32), nullable=False)
    category = Column(String(16), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)


class Message(Base):
    __tablename__ = "messages"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid_lib.uuid4)
    sender_profile_id = Column(String(32), nullable=False, index=True)
    recipient_profile_id = Column(String(32), nullable=False, index=True)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
