"""
Pydantic models for the account directory API (OTP, signup, login, profiles)
"""
from pydantic import BaseModel, ConfigDict, EmailStr, Field, AliasChoices, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional, Dict, Any
from datetime import datetime
from enum import Enum


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"

    @property
    def opposite(self) -> "Gender":
        return Gender.FEMALE if self is Gender.MALE else Gender.MALE


class CamelModel(BaseModel):
    """Base model speaking the frontend's camelCase JSON"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True)

# =============================================================================
# OTP & LOGIN
# =============================================================================

class SendOTPRequest(BaseModel):
    email: EmailStr


class VerifyOTPRequest(BaseModel):
    email: EmailStr
    otp: str = Field(..., pattern=r"^\d{6}$", description="6-digit code sent by email")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)

# =============================================================================
# SIGNUP / PROFILE COMPLETION
# =============================================================================

class PersonalInfoIn(CamelModel):
    email: Optional[str] = None
    name: Optional[str] = None
    mobile: Optional[str] = None
    gender: Optional[Gender] = None
    looking_for: Optional[str] = None
    hobbies: Optional[str] = None
    about: Optional[str] = None
    profile_image: Optional[str] = None

    @field_validator('gender', mode='before')
    @classmethod
    def normalize_gender(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v


class DemographicsIn(CamelModel):
    date_of_birth: Optional[str] = None
    height: Optional[str] = None
    marital_status: Optional[str] = None
    religion: Optional[str] = None
    community: Optional[str] = None
    mother_tongue: Optional[str] = None
    horoscope: Optional[bool] = None


class ProfessionalInfoIn(CamelModel):
    education: Optional[str] = None
    occupation: Optional[str] = None
    income: Optional[str] = None


class LocationIn(CamelModel):
    city: Optional[str] = None
    state: Optional[str] = None


class CredentialsIn(CamelModel):
    password: Optional[str] = None
    remember_me: Optional[bool] = False


class FamilyIn(CamelModel):
    father: Optional[str] = None
    mother: Optional[str] = None
    siblings: Optional[str] = None


class ProfileCreateRequest(CamelModel):
    """Full signup payload; every section is replaced on submission"""
    personal_info: PersonalInfoIn = Field(default_factory=PersonalInfoIn)
    demographics: DemographicsIn = Field(default_factory=DemographicsIn)
    professional_info: ProfessionalInfoIn = Field(default_factory=ProfessionalInfoIn)
    location: LocationIn = Field(default_factory=LocationIn)
    credentials: CredentialsIn = Field(default_factory=CredentialsIn)
    family: FamilyIn = Field(default_factory=FamilyIn)
    app_version: Optional[str] = None


class ProfileCreateResponse(CamelModel):
    message: str
    profile_id: str
    email: str
    subscription: str

# =============================================================================
# PARTIAL UPDATE
# =============================================================================

class FamilyUpdate(CamelModel):
    father: Optional[str] = None
    mother: Optional[str] = None


class ProfileFieldsUpdate(CamelModel):
    """Fields a listed profile may edit after signup; absent fields are left untouched"""
    name: Optional[str] = None
    height: Optional[str] = None
    occupation: Optional[str] = Field(None, validation_alias=AliasChoices("occupation", "profession"))
    education: Optional[str] = None
    religion: Optional[str] = None
    community: Optional[str] = Field(None, validation_alias=AliasChoices("community", "caste"))
    mother_tongue: Optional[str] = Field(
        None, validation_alias=AliasChoices("motherTongue", "mother_tongue", "language")
    )
    hobbies: Optional[str] = None
    family: Optional[FamilyUpdate] = None


class ProfileUpdateRequest(CamelModel):
    profile_id: str = Field(..., min_length=1)
    updated_data: ProfileFieldsUpdate

# =============================================================================
# RESPONSES
# =============================================================================

class ProfileSummary(CamelModel):
    """Display card used by search, recent matches and interaction lists"""
    id: str
    name: Optional[str] = None
    age: Optional[int] = None
    profession: Optional[str] = None
    location: Optional[str] = None
    education: Optional[str] = None
    community: Optional[str] = None
    income: Optional[str] = None
    horoscope: bool = False
    image: str


class FamilyView(CamelModel):
    father: str = "Not specified"
    mother: str = "Not specified"
    siblings: str = "None"


class ProfileDetail(CamelModel):
    id: str
    name: str
    age: Optional[int] = None
    profession: str
    location: str
    education: str
    salary: str
    height: str
    community: str
    mother_tongue: str
    caste: str
    religion: str
    hobbies_and_interests: str
    images: List[str]
    about: str
    family: FamilyView
    preferences: List[str]
    profile_views: int = 0


class SubscriptionPeriodView(CamelModel):
    type: str
    start_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    payment_id: Optional[str] = None
    status: str
    auto_renew: bool = False
    upgraded_at: Optional[datetime] = None


class SubscriptionView(CamelModel):
    current: str
    details: Dict[str, Any]
    history: List[SubscriptionPeriodView] = []


class AccountView(CamelModel):
    """Owner's view of their own account"""
    profile_id: Optional[str] = None
    name: Optional[str] = None
    email: str
    mobile: Optional[str] = None
    gender: Optional[str] = None
    looking_for: Optional[str] = None
    last_active: Optional[datetime] = None
    date_of_birth: Optional[str] = None
    height: Optional[str] = None
    marital_status: Optional[str] = None
    religion: Optional[str] = None
    community: Optional[str] = None
    mother_tongue: Optional[str] = None
    education: Optional[str] = None
    occupation: Optional[str] = None
    income: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    subscription: SubscriptionView
    profile_created_at: Optional[datetime] = None
    app_version: Optional[str] = None


class ProfileStats(CamelModel):
    profile_views: int
    interests_received: int
    messages: int
