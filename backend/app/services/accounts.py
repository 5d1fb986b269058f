"""
Account Service
Credential store operations for members and administrators.
"""

import logging
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import select, update, delete, case, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.user import User, Gender, AccountStatus
from app.models.matches import Like, Match
from app.models.admin import Admin
from app.services import auth_service
from app.services.auth_service import InvalidCredentialsError, InactiveAccountError
from app.utils.password_policy import validate_member_password, validate_admin_password

logger = logging.getLogger(__name__)


class AccountError(Exception):
    """Base class for credential store failures."""


class AccountValidationError(AccountError):
    pass


class DuplicateEmailError(AccountError):
    pass


class UserNotFoundError(AccountError):
    pass


class AdminNotFoundError(AccountError):
    pass


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _validate_email(email: str) -> str:
    email = normalize_email(email)
    if "@" not in email:
        raise AccountValidationError("Invalid email format")
    return email


def validate_member_registration(email: str, password: str) -> str:
    """
    Check a sign-up email and password before anything else happens.
    Returns the normalized email.
    """
    email = _validate_email(email)
    errors = validate_member_password(password)
    if errors:
        raise AccountValidationError("; ".join(errors))
    return email


# =============================================================================
# Members
# =============================================================================

async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def find_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def create_user(
    db: AsyncSession,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    date_of_birth: date,
    gender: Gender,
    religion: Optional[str] = None,
    occupation: Optional[str] = None,
    location: Optional[str] = None,
    about: Optional[str] = None,
    profile_picture: str = "",
    additional_pictures: Optional[List[str]] = None,
) -> User:
    """Register a member. The password is hashed before it reaches the database."""
    email = validate_member_registration(email, password)

    if await find_user_by_email(db, email):
        raise DuplicateEmailError("Email already registered")

    user = User(
        email=email,
        hashed_password=auth_service.get_password_hash(password),
        first_name=first_name,
        last_name=last_name,
        date_of_birth=date_of_birth,
        gender=gender,
        religion=religion or None,
        occupation=occupation or None,
        location=location or None,
        about=about or None,
        profile_picture=profile_picture or "",
        additional_pictures=list(additional_pictures or []),
        photos=[],
        status=AccountStatus.ACTIVE,
        likes_count=0,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateEmailError("Email already exists")
    await db.refresh(user)
    logger.info(f"Registered user {user.id}")
    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User:
    """Verify credentials, require an active account and stamp last activity."""
    user = await find_user_by_email(db, email)
    if not user or not auth_service.verify_password(password, user.hashed_password):
        raise InvalidCredentialsError("Invalid credentials")
    if user.status != AccountStatus.ACTIVE:
        raise InactiveAccountError("Account is not active")

    user.last_active = datetime.utcnow()
    await db.commit()
    return user


async def update_user_status(db: AsyncSession, user: User, status: AccountStatus) -> User:
    user.status = status
    user.touch()
    await db.commit()
    return user


async def update_user_fields(db: AsyncSession, user: User, changes: dict) -> User:
    """
    Partial overwrite used by the admin console.

    `changes` holds only the keys the caller supplied: email, status and the
    nested `profile` / `preferences` dicts, each merged field by field.
    """
    if changes.get("email"):
        email = _validate_email(changes["email"])
        existing = await db.execute(select(User.id).where(User.email == email, User.id != user.id))
        if existing.scalar_one_or_none() is not None:
            raise DuplicateEmailError("Email already exists")
        user.email = email

    for field, value in (changes.get("profile") or {}).items():
        if value is not None:
            setattr(user, field, value)

    preferences = changes.get("preferences") or {}
    age_range = preferences.get("age_range") or {}
    if age_range.get("min") is not None:
        user.pref_age_min = age_range["min"]
    if age_range.get("max") is not None:
        user.pref_age_max = age_range["max"]
    if user.pref_age_min > user.pref_age_max:
        raise AccountValidationError("Minimum age cannot be greater than maximum age")
    if preferences.get("religion") is not None:
        user.pref_religion = preferences["religion"]
    if preferences.get("location") is not None:
        user.pref_location = preferences["location"]

    user.touch()
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateEmailError("Email already exists")

    if changes.get("status"):
        await update_user_status(db, user, AccountStatus(changes["status"]))
    await db.refresh(user)
    return user


async def delete_user(db: AsyncSession, user_id: int) -> None:
    """
    Hard-delete a member.

    Like and match edges are removed with the user, and every member the
    deleted user had liked loses that pending like from its counter.
    """
    user = await get_user(db, user_id)
    if not user:
        raise UserNotFoundError("User not found")

    liked_ids = (await db.execute(
        select(Like.liked_id).where(Like.liker_id == user_id)
    )).scalars().all()
    if liked_ids:
        await db.execute(
            update(User)
            .where(User.id.in_(liked_ids))
            .values(likes_count=case((User.likes_count > 0, User.likes_count - 1), else_=0))
        )

    await db.execute(delete(Like).where(or_(Like.liker_id == user_id, Like.liked_id == user_id)))
    await db.execute(delete(Match).where(or_(Match.user_id == user_id, Match.matched_user_id == user_id)))
    await db.delete(user)
    await db.commit()
    logger.info(f"Deleted user {user_id} ({len(liked_ids)} pending likes retracted)")


# =============================================================================
# Administrators
# =============================================================================

async def get_admin(db: AsyncSession, admin_id: int) -> Optional[Admin]:
    result = await db.execute(select(Admin).where(Admin.id == admin_id))
    return result.scalar_one_or_none()


async def find_admin_by_email(db: AsyncSession, email: str) -> Optional[Admin]:
    result = await db.execute(select(Admin).where(Admin.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def create_admin(
    db: AsyncSession,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: Optional[str] = None,
    permissions: Optional[List[str]] = None,
) -> Admin:
    email = _validate_email(email)
    errors = validate_admin_password(password)
    if errors:
        raise AccountValidationError("; ".join(errors))

    if await find_admin_by_email(db, email):
        raise DuplicateEmailError("Email already registered")

    admin = Admin(
        email=email,
        hashed_password=auth_service.get_password_hash(password),
        first_name=first_name,
        last_name=last_name,
        role=role or "admin",
        permissions=list(permissions if permissions is not None else settings.default_admin_permissions_list),
        status=AccountStatus.ACTIVE,
    )
    db.add(admin)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateEmailError("Email already exists")
    await db.refresh(admin)
    logger.info(f"Registered admin {admin.id} with role '{admin.role}'")
    return admin


async def authenticate_admin(db: AsyncSession, email: str, password: str) -> Admin:
    admin = await find_admin_by_email(db, email)
    if not admin or not auth_service.verify_password(password, admin.hashed_password):
        raise InvalidCredentialsError("Invalid credentials")
    if admin.status != AccountStatus.ACTIVE:
        raise InactiveAccountError("Account is not active")

    admin.last_login = datetime.utcnow()
    await db.commit()
    return admin
