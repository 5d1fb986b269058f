"""
Authentication Router
Member registration, login and own-account endpoints.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import settings
from app.database import get_db
from app.models.user import User, Gender
from app.schemas.user import (
    AuthResponse,
    ProfileTextUpdate,
    ProfileUpdateResponse,
    UserLogin,
    UserResponse,
    UserSummary,
)
from app.services import accounts, auth_service, profiles, reporting
from app.services.cache import invalidate
from app.services.media import CloudinaryMediaStore, get_media_store, read_upload, read_uploads
from app.api.dependencies import get_current_user

router = APIRouter()
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.rate_limit_register)
async def register(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    first_name: str = Form(..., alias="firstName", min_length=1, max_length=100),
    last_name: str = Form(..., alias="lastName", min_length=1, max_length=100),
    date_of_birth: date = Form(..., alias="dateOfBirth"),
    gender: Gender = Form(...),
    religion: Optional[str] = Form(None),
    occupation: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    about: Optional[str] = Form(None),
    profile_picture: Optional[UploadFile] = File(None, alias="profilePicture"),
    post_pictures: Optional[List[UploadFile]] = File(None, alias="postPictures"),
    db: AsyncSession = Depends(get_db),
    media: CloudinaryMediaStore = Depends(get_media_store),
):
    """
    Register a member with an optional profile picture and up to four
    additional pictures. Files are validated before anything is uploaded.
    """
    accounts.validate_member_registration(email, password)
    if await accounts.find_user_by_email(db, email):
        raise accounts.DuplicateEmailError("Email already registered")

    picture = await read_upload(profile_picture) if profile_picture and profile_picture.filename else None
    additional = await read_uploads(post_pictures, settings.max_additional_pictures)
    picture_url, additional_urls = await profiles.upload_profile_media(media, picture, additional)

    user = await accounts.create_user(
        db,
        email=email,
        password=password,
        first_name=first_name,
        last_name=last_name,
        date_of_birth=date_of_birth,
        gender=gender,
        religion=religion,
        occupation=occupation,
        location=location,
        about=about,
        profile_picture=picture_url or "",
        additional_pictures=additional_urls,
    )
    await invalidate(reporting.STATS_CACHE_KEY)

    return AuthResponse(
        token=auth_service.create_user_token(user.id),
        user=UserSummary.from_user(user),
    )


@router.post("/login", response_model=AuthResponse)
@limiter.limit(settings.rate_limit_login)
async def login(
    request: Request,
    login_data: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """
    Exchange email and password for a bearer token valid for seven days.
    Rate limited to slow down brute force attempts.
    """
    user = await accounts.authenticate_user(db, login_data.email, login_data.password)
    return AuthResponse(
        token=auth_service.create_user_token(user.id),
        user=UserSummary.from_user(user),
    )


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)):
    """Current member's full document."""
    return UserResponse.from_user(user)


@router.put("/profile", response_model=ProfileUpdateResponse)
async def update_profile(
    update_data: ProfileTextUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Shallow-merge name, location and about text into the profile."""
    user = await profiles.update_profile(db, user, update_data.model_dump(exclude_none=True))
    return ProfileUpdateResponse(
        message="Profile updated successfully",
        user=UserSummary.from_user(user),
    )
