"""
API Dependencies
Reusable FastAPI dependencies for endpoint protection.
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.user import User, AccountStatus
from app.models.admin import Admin
from app.services import auth_service, accounts

bearer_scheme = HTTPBearer(auto_error=False)


def _bearer_token(credentials: Optional[HTTPAuthorizationCredentials]) -> str:
    if not credentials or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


def _subject(token: str, kind: str) -> int:
    payload = auth_service.decode_access_token(token, kind=kind)
    subject = auth_service.subject_id(payload) if payload else None
    if subject is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return subject


def _require_active(account_status: AccountStatus) -> None:
    if account_status != AccountStatus.ACTIVE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is not active",
        )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Dependency that resolves the acting member from the bearer token.
    Rejects missing/invalid tokens, unknown subjects and non-active accounts.
    """
    user_id = _subject(_bearer_token(credentials), auth_service.USER_TOKEN)
    user = await accounts.get_user(db, user_id)
    if not user:
        raise accounts.UserNotFoundError("User not found")
    _require_active(user.status)
    return user


async def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db)
) -> Admin:
    """
    Dependency that resolves the acting administrator from the bearer token.
    Member tokens are not accepted.
    """
    admin_id = _subject(_bearer_token(credentials), auth_service.ADMIN_TOKEN)
    admin = await accounts.get_admin(db, admin_id)
    if not admin:
        raise accounts.AdminNotFoundError("Admin not found")
    _require_active(admin.status)
    return admin


def require_permission(permission: str):
    """
    Dependency factory enforcing that the administrator holds `permission`.
    """
    async def checker(admin: Admin = Depends(get_current_admin)) -> Admin:
        if not admin.has_permission(permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action",
            )
        return admin
    return checker
