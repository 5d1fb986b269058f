"""
Profile Service
Shallow-merge profile updates and ordered picture/photo reference lists.

Media objects are deleted from the store before the reference is removed
from the document. A store failure leaves the reference in place; a database
failure after a successful delete leaves a dangling reference. Neither case
is compensated.
"""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.user import User
from app.services.media import CloudinaryMediaStore, MediaFile, PROFILE_TRANSFORMATION

logger = logging.getLogger(__name__)

# Fields a member may change on their own profile
EDITABLE_PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "date_of_birth",
    "gender",
    "religion",
    "occupation",
    "location",
    "about",
)

PICTURE_LISTS = {"additional_pictures", "photos"}


class ReferenceNotFoundError(LookupError):
    pass


def merge_profile(user: User, fields: dict) -> User:
    """Overwrite only the supplied, non-empty fields; everything else is kept."""
    for name in EDITABLE_PROFILE_FIELDS:
        value = fields.get(name)
        if value is None or value == "":
            continue
        setattr(user, name, value)
    user.touch()
    return user


async def upload_all(
    media: CloudinaryMediaStore,
    files: List[MediaFile],
    folder: str,
    transformation: Optional[str] = None,
) -> List[str]:
    """Upload files in order and return their URLs."""
    urls = []
    for media_file in files:
        urls.append(await media.upload(media_file, folder, transformation))
    return urls


async def upload_profile_media(
    media: CloudinaryMediaStore,
    profile_picture: Optional[MediaFile],
    additional: List[MediaFile],
) -> tuple[Optional[str], List[str]]:
    """Upload a profile picture and additional pictures into the profile folder."""
    picture_url = None
    if profile_picture is not None:
        picture_url = await media.upload(profile_picture, settings.media_folder, PROFILE_TRANSFORMATION)
    additional_urls = await upload_all(media, additional, settings.media_folder, PROFILE_TRANSFORMATION)
    return picture_url, additional_urls


async def update_profile(
    db: AsyncSession,
    user: User,
    fields: dict,
    picture_url: Optional[str] = None,
    additional_urls: Optional[List[str]] = None,
) -> User:
    """Apply a member's profile edit. New additional pictures replace the list."""
    if picture_url:
        user.profile_picture = picture_url
    if additional_urls:
        user.additional_pictures = list(additional_urls)
    merge_profile(user, fields)
    await db.commit()
    await db.refresh(user)
    return user


async def remove_profile_picture(db: AsyncSession, user: User, media: CloudinaryMediaStore) -> User:
    if user.profile_picture:
        await media.destroy(user.profile_picture)
    user.profile_picture = ""
    user.touch()
    await db.commit()
    return user


async def remove_reference(
    db: AsyncSession,
    user: User,
    list_name: str,
    index: int,
    media: CloudinaryMediaStore,
) -> List[str]:
    """
    Remove the reference at `index` from an ordered picture list; later
    entries shift down by one. Raises ReferenceNotFoundError when the index
    is out of range.
    """
    if list_name not in PICTURE_LISTS:
        raise ValueError(f"Unknown picture list: {list_name}")

    references = list(getattr(user, list_name) or [])
    if index < 0 or index >= len(references) or not references[index]:
        raise ReferenceNotFoundError(index)

    await media.destroy(references[index])
    del references[index]

    # Assign a new list so the JSON column is flagged as modified
    setattr(user, list_name, references)
    user.touch()
    await db.commit()
    logger.info(f"Removed {list_name}[{index}] for user {user.id}")
    return references


async def add_photos(
    db: AsyncSession,
    user: User,
    files: List[MediaFile],
    media: CloudinaryMediaStore,
) -> List[str]:
    """Upload every file, then append all URLs to the gallery at once."""
    urls = await upload_all(media, files, settings.photo_folder)
    user.photos = list(user.photos or []) + urls
    user.touch()
    await db.commit()
    return list(user.photos)
