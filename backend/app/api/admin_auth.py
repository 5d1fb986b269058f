"""
Admin Authentication Router
Administrator registration (gated by a shared key), login and profile.
"""

import hmac

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import settings
from app.database import get_db
from app.models.admin import Admin
from app.schemas.admin import AdminAuthResponse, AdminLogin, AdminLoginResponse, AdminRegister, AdminResponse
from app.services import accounts, auth_service
from app.api.dependencies import get_current_admin

router = APIRouter()
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


def _valid_registration_key(candidate: str) -> bool:
    expected = settings.admin_registration_key
    if not expected or not candidate:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


@router.post("/register", response_model=AdminAuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("3/hour")
async def register_admin(
    request: Request,
    admin_data: AdminRegister,
    db: AsyncSession = Depends(get_db)
):
    """
    Register an administrator with the default permission set.
    Requires the shared admin registration key.
    """
    if not _valid_registration_key(admin_data.admin_key):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin registration key",
        )

    admin = await accounts.create_admin(
        db,
        email=admin_data.email,
        password=admin_data.password,
        first_name=admin_data.first_name,
        last_name=admin_data.last_name,
        role=admin_data.role,
    )
    return AdminAuthResponse(
        token=auth_service.create_admin_token(admin.id),
        admin=AdminResponse.model_validate(admin),
    )


@router.post("/login", response_model=AdminLoginResponse)
@limiter.limit(settings.rate_limit_login)
async def login_admin(
    request: Request,
    login_data: AdminLogin,
    db: AsyncSession = Depends(get_db)
):
    """Exchange administrator credentials for a 24 hour bearer token."""
    admin = await accounts.authenticate_admin(db, login_data.email, login_data.password)
    return AdminLoginResponse(
        success=True,
        token=auth_service.create_admin_token(admin.id),
        admin=AdminResponse.model_validate(admin),
    )


@router.get("/me", response_model=AdminResponse)
async def get_admin_me(admin: Admin = Depends(get_current_admin)):
    return AdminResponse.model_validate(admin)
