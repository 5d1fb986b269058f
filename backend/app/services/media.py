"""
Media Service
Validates uploaded images and talks to the Cloudinary media store.
"""

import hashlib
import io
import logging
import time
from dataclasses import dataclass
from functools import lru_cache
from pathlib import PurePosixPath
from typing import Iterable, List, Optional
from urllib.parse import urlparse

import httpx
from fastapi import UploadFile
from PIL import Image as PILImage, UnidentifiedImageError

from app.config import settings

logger = logging.getLogger(__name__)

CLOUDINARY_API_URL = "https://api.cloudinary.com/v1_1"

# Profile pictures and additional pictures
PROFILE_FORMATS = {"JPEG", "PNG"}
PROFILE_EXTENSIONS = {".jpg", ".jpeg", ".png"}

# Generic photo gallery
PHOTO_FORMATS = PROFILE_FORMATS | {"GIF", "WEBP"}
PHOTO_EXTENSIONS = PROFILE_EXTENSIONS | {".gif", ".webp"}

PROFILE_TRANSFORMATION = "c_limit,h_500,w_500"


class MediaValidationError(ValueError):
    """Uploaded file rejected before it reaches the media store."""


class MediaStoreError(Exception):
    """The media store could not complete an upload or delete."""


@dataclass
class MediaFile:
    filename: str
    content: bytes
    content_type: str
    format: str


def validate_image(
    filename: str,
    content: bytes,
    allowed_formats: Iterable[str] = PROFILE_FORMATS,
    allowed_extensions: Iterable[str] = PROFILE_EXTENSIONS,
    max_bytes: Optional[int] = None,
) -> str:
    """
    Check size, extension and the real image format of an upload.
    Returns the Pillow format name (e.g. "JPEG").
    """
    max_bytes = max_bytes or settings.max_upload_bytes
    if len(content) > max_bytes:
        raise MediaValidationError(
            f"File size is too large. Maximum size is {max_bytes // (1024 * 1024)}MB"
        )
    if not content:
        raise MediaValidationError("Uploaded file is empty")

    allowed_formats = set(allowed_formats)
    allowed_extensions = set(allowed_extensions)
    extension = PurePosixPath(filename or "").suffix.lower()
    if extension not in allowed_extensions:
        raise MediaValidationError(_format_message(allowed_extensions))

    try:
        with PILImage.open(io.BytesIO(content)) as img:
            img.verify()
            image_format = img.format
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise MediaValidationError("Uploaded file is not a valid image")

    if image_format not in allowed_formats:
        raise MediaValidationError(_format_message(allowed_extensions))
    return image_format


def _format_message(extensions: Iterable[str]) -> str:
    names = ", ".join(sorted(ext.lstrip(".") for ext in extensions))
    return f"Only {names} images are allowed"


async def read_upload(
    upload: UploadFile,
    allowed_formats: Iterable[str] = PROFILE_FORMATS,
    allowed_extensions: Iterable[str] = PROFILE_EXTENSIONS,
) -> MediaFile:
    """Read an UploadFile (bounded by the size limit) and validate it."""
    content = await upload.read(settings.max_upload_bytes + 1)
    image_format = validate_image(
        upload.filename or "",
        content,
        allowed_formats=allowed_formats,
        allowed_extensions=allowed_extensions,
    )
    return MediaFile(
        filename=upload.filename or "upload",
        content=content,
        content_type=upload.content_type or "application/octet-stream",
        format=image_format,
    )


async def read_uploads(
    uploads: Optional[List[UploadFile]],
    max_count: int,
    allowed_formats: Iterable[str] = PROFILE_FORMATS,
    allowed_extensions: Iterable[str] = PROFILE_EXTENSIONS,
) -> List[MediaFile]:
    """Validate a multi-file form field. Every file is checked before any upload."""
    uploads = [u for u in (uploads or []) if u is not None and u.filename]
    if len(uploads) > max_count:
        raise MediaValidationError(f"Too many files. Maximum is {max_count}")
    return [await read_upload(u, allowed_formats, allowed_extensions) for u in uploads]


def public_id_from_url(url: str) -> Optional[str]:
    """
    Derive the Cloudinary public id from a delivery URL.

    https://res.cloudinary.com/<cloud>/image/upload/v123/folder/name.jpg
    -> "folder/name"
    """
    if not url:
        return None
    path = urlparse(url).path
    marker = "/upload/"
    if marker in path:
        parts = [p for p in path.split(marker, 1)[1].split("/") if p]
        # Skip transformation and version segments
        while parts and ("," in parts[0] or (parts[0].startswith("v") and parts[0][1:].isdigit())):
            parts = parts[1:]
    else:
        parts = [p for p in path.split("/") if p][-1:]
    if not parts:
        return None
    parts[-1] = parts[-1].rsplit(".", 1)[0]
    return "/".join(parts)


class CloudinaryMediaStore:
    """Signed uploads and deletes against the Cloudinary REST API."""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str, timeout: float = 30.0):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def sign(self, params: dict) -> str:
        """Cloudinary signature: sha1 of the sorted params followed by the secret."""
        to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] not in (None, ""))
        return hashlib.sha1(f"{to_sign}{self.api_secret}".encode("utf-8")).hexdigest()

    def _signed_params(self, params: dict) -> dict:
        params = {**params, "timestamp": str(int(time.time()))}
        params["signature"] = self.sign(params)
        params["api_key"] = self.api_key
        return params

    def _endpoint(self, action: str) -> str:
        return f"{CLOUDINARY_API_URL}/{self.cloud_name}/image/{action}"

    async def upload(self, media: MediaFile, folder: str, transformation: Optional[str] = None) -> str:
        """Upload an image and return its secure URL."""
        if not self.configured:
            raise MediaStoreError("Media store is not configured")

        params = {"folder": folder}
        if transformation:
            params["transformation"] = transformation
        data = self._signed_params(params)
        files = {"file": (media.filename, media.content, media.content_type)}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(self._endpoint("upload"), data=data, files=files)
                resp.raise_for_status()
                payload = resp.json()
        except httpx.HTTPError as e:
            logger.error(f"[MEDIA] Upload of '{media.filename}' failed: {e}")
            raise MediaStoreError("Error uploading image") from e

        url = payload.get("secure_url")
        if not url:
            raise MediaStoreError("Media store returned no URL")
        logger.info(f"[MEDIA] Uploaded {media.filename} to {folder}")
        return url

    async def destroy(self, url: str) -> None:
        """Delete the stored object behind a delivery URL."""
        public_id = public_id_from_url(url)
        if not public_id:
            return
        if not self.configured:
            raise MediaStoreError("Media store is not configured")

        data = self._signed_params({"public_id": public_id})
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(self._endpoint("destroy"), data=data)
                resp.raise_for_status()
                result = resp.json().get("result")
        except httpx.HTTPError as e:
            logger.error(f"[MEDIA] Delete of '{public_id}' failed: {e}")
            raise MediaStoreError("Error deleting image") from e

        if result not in ("ok", "not found"):
            raise MediaStoreError(f"Unexpected media store response: {result}")
        if result == "not found":
            logger.warning(f"[MEDIA] '{public_id}' was already gone from the media store")


@lru_cache()
def get_media_store() -> CloudinaryMediaStore:
    """Dependency returning the process-wide media store client."""
    return CloudinaryMediaStore(
        settings.cloudinary_cloud_name,
        settings.cloudinary_api_key,
        settings.cloudinary_api_secret,
        timeout=settings.media_timeout_seconds,
    )
