"""
Authentication Service
Handles password hashing, JWT creation, and validation.
"""

from datetime import datetime, timedelta
from typing import Optional

import jwt
from jwt import PyJWTError
from passlib.context import CryptContext

from app.config import settings

USER_TOKEN = "user"
ADMIN_TOKEN = "admin"

# Password hashing configuration
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AuthError(Exception):
    """Base class for authentication and authorization failures."""


class InvalidCredentialsError(AuthError):
    pass


class InactiveAccountError(AuthError):
    pass


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check if plain password matches hashed version."""
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Generate salted bcrypt hash of password."""
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a new JWT access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.user_token_expire_minutes)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)
    return encoded_jwt


def create_user_token(user_id: int) -> str:
    return create_access_token(
        {"sub": str(user_id), "kind": USER_TOKEN},
        timedelta(minutes=settings.user_token_expire_minutes),
    )


def create_admin_token(admin_id: int) -> str:
    return create_access_token(
        {"sub": str(admin_id), "kind": ADMIN_TOKEN},
        timedelta(minutes=settings.admin_token_expire_minutes),
    )


def decode_access_token(token: str, kind: Optional[str] = None) -> Optional[dict]:
    """
    Decode and validate a JWT access token.
    Returns None when the signature, expiry or token kind does not check out.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except PyJWTError:
        return None
    if kind is not None and payload.get("kind") != kind:
        return None
    return payload


def subject_id(payload: dict) -> Optional[int]:
    """Extract the numeric subject id from a decoded token."""
    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        return None
