"""
Profile Router
Own-profile editing plus picture and photo gallery management.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.models.user import User, Gender
from app.schemas.common import MessageResponse
from app.schemas.profile import PhotosResponse
from app.schemas.user import ProfileUpdateResponse, UserResponse, UserSummary
from app.services import profiles
from app.services.media import (
    CloudinaryMediaStore,
    MediaValidationError,
    PHOTO_EXTENSIONS,
    PHOTO_FORMATS,
    get_media_store,
    read_upload,
    read_uploads,
)
from app.api.dependencies import get_current_user

router = APIRouter()


@router.get("", response_model=UserResponse)
async def get_profile(user: User = Depends(get_current_user)):
    return UserResponse.from_user(user)


@router.put("", response_model=ProfileUpdateResponse)
async def update_profile(
    first_name: Optional[str] = Form(None, alias="firstName"),
    last_name: Optional[str] = Form(None, alias="lastName"),
    date_of_birth: Optional[date] = Form(None, alias="dateOfBirth"),
    gender: Optional[Gender] = Form(None),
    religion: Optional[str] = Form(None),
    occupation: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    about: Optional[str] = Form(None),
    profile_picture: Optional[UploadFile] = File(None, alias="profilePicture"),
    additional_pictures: Optional[List[UploadFile]] = File(None, alias="additionalPictures"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    media: CloudinaryMediaStore = Depends(get_media_store),
):
    """
    Partial profile update. Supplied text fields overwrite, omitted ones are
    kept. A new profile picture replaces the old reference; new additional
    pictures replace the whole list.
    """
    picture = await read_upload(profile_picture) if profile_picture and profile_picture.filename else None
    additional = await read_uploads(additional_pictures, settings.max_additional_pictures)
    picture_url, additional_urls = await profiles.upload_profile_media(media, picture, additional)

    fields = {
        "first_name": first_name,
        "last_name": last_name,
        "date_of_birth": date_of_birth,
        "gender": gender,
        "religion": religion,
        "occupation": occupation,
        "location": location,
        "about": about,
    }
    user = await profiles.update_profile(db, user, fields, picture_url, additional_urls)
    return ProfileUpdateResponse(
        message="Profile updated successfully",
        user=UserSummary.from_user(user),
    )


@router.delete("/picture", response_model=MessageResponse)
async def delete_profile_picture(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    media: CloudinaryMediaStore = Depends(get_media_store),
):
    await profiles.remove_profile_picture(db, user, media)
    return MessageResponse(message="Profile picture deleted successfully")


@router.delete("/pictures/{index}", response_model=MessageResponse)
async def delete_additional_picture(
    index: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    media: CloudinaryMediaStore = Depends(get_media_store),
):
    """Delete an additional picture by position; later pictures move up one slot."""
    try:
        await profiles.remove_reference(db, user, "additional_pictures", index, media)
    except profiles.ReferenceNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Picture not found")
    return MessageResponse(message="Picture deleted successfully")


@router.post("/photos", response_model=PhotosResponse)
async def upload_photos(
    photos: Optional[List[UploadFile]] = File(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    media: CloudinaryMediaStore = Depends(get_media_store),
):
    """Upload up to ten gallery photos in one request."""
    files = await read_uploads(photos, settings.max_photos, PHOTO_FORMATS, PHOTO_EXTENSIONS)
    if not files:
        raise MediaValidationError("No files uploaded")
    gallery = await profiles.add_photos(db, user, files, media)
    return PhotosResponse(message="Photos uploaded successfully", photos=gallery)


@router.get("/photos", response_model=PhotosResponse, response_model_exclude_none=True)
async def list_photos(user: User = Depends(get_current_user)):
    return PhotosResponse(photos=list(user.photos or []))


@router.delete("/photos/{index}", response_model=PhotosResponse)
async def delete_photo(
    index: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    media: CloudinaryMediaStore = Depends(get_media_store),
):
    try:
        gallery = await profiles.remove_reference(db, user, "photos", index, media)
    except profiles.ReferenceNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Photo not found")
    return PhotosResponse(message="Photo deleted successfully", photos=gallery)
