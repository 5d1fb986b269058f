"""
User Schemas
Pydantic models for member accounts, profiles and auth payloads.
"""

from datetime import date, datetime
from typing import List, Optional
from pydantic import Field, model_validator

from app.models.user import User, Gender, AccountStatus
from app.schemas.common import BaseResponse
from app.utils.dates import calculate_age


class ProfileOut(BaseResponse):
    first_name: str
    last_name: str
    date_of_birth: date
    age: int
    gender: Gender
    religion: Optional[str] = None
    occupation: Optional[str] = None
    location: Optional[str] = None
    about: Optional[str] = None
    profile_picture: str = ""
    additional_pictures: List[str] = []
    photos: List[str] = []

    @classmethod
    def from_user(cls, user: User) -> "ProfileOut":
        return cls(
            first_name=user.first_name,
            last_name=user.last_name,
            date_of_birth=user.date_of_birth,
            age=calculate_age(user.date_of_birth),
            gender=user.gender,
            religion=user.religion,
            occupation=user.occupation,
            location=user.location,
            about=user.about,
            profile_picture=user.profile_picture or "",
            additional_pictures=list(user.additional_pictures or []),
            photos=list(user.photos or []),
        )


class AgeRange(BaseResponse):
    min: int = Field(18, ge=0, le=150)
    max: int = Field(65, ge=0, le=150)


class PreferencesOut(BaseResponse):
    age_range: AgeRange
    religion: Optional[str] = None
    location: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "PreferencesOut":
        return cls(
            age_range=AgeRange(min=user.pref_age_min, max=user.pref_age_max),
            religion=user.pref_religion,
            location=user.pref_location,
        )


class UserSummary(BaseResponse):
    """Compact representation returned by login/registration."""
    id: int
    email: str
    profile: ProfileOut

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        return cls(id=user.id, email=user.email, profile=ProfileOut.from_user(user))


class UserResponse(UserSummary):
    """Full user document minus the password hash."""
    status: AccountStatus
    likes_count: int
    preferences: PreferencesOut
    created_at: datetime
    updated_at: Optional[datetime] = None
    last_active: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            profile=ProfileOut.from_user(user),
            status=user.status,
            likes_count=user.likes_count,
            preferences=PreferencesOut.from_user(user),
            created_at=user.created_at,
            updated_at=user.updated_at,
            last_active=user.last_active,
        )


class AuthResponse(BaseResponse):
    token: str
    user: UserSummary


class UserLogin(BaseResponse):
    email: str
    password: str


class ProfileTextUpdate(BaseResponse):
    """Body of PUT /auth/profile. Omitted or empty fields are kept."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    location: Optional[str] = None
    about: Optional[str] = None


class ProfileUpdateResponse(BaseResponse):
    message: str
    user: UserSummary


class ProfileFieldsUpdate(BaseResponse):
    """Profile sub-document accepted by the admin update endpoint."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    religion: Optional[str] = None
    occupation: Optional[str] = None
    location: Optional[str] = None
    about: Optional[str] = None


class AgeRangeUpdate(BaseResponse):
    min: Optional[int] = Field(None, ge=0, le=150)
    max: Optional[int] = Field(None, ge=0, le=150)

    @model_validator(mode="after")
    def check_order(self) -> "AgeRangeUpdate":
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError("min cannot be greater than max")
        return self


class PreferencesUpdate(BaseResponse):
    age_range: Optional[AgeRangeUpdate] = None
    religion: Optional[str] = None
    location: Optional[str] = None


class AdminUserUpdate(BaseResponse):
    email: Optional[str] = None
    status: Optional[AccountStatus] = None
    profile: Optional[ProfileFieldsUpdate] = None
    preferences: Optional[PreferencesUpdate] = None


class MatchSummary(BaseResponse):
    id: int
    email: str
    first_name: str
    last_name: str


class AdminUserDetail(UserResponse):
    matches: List[MatchSummary] = []


class UserListResponse(BaseResponse):
    users: List[UserResponse]
    total_pages: int
    current_page: int
    total_users: int
