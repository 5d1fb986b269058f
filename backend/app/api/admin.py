"""
Admin API
Member statistics and account management for administrators.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.admin import Admin
from app.schemas.common import MessageResponse
from app.schemas.stats import UserStatsResponse
from app.schemas.user import AdminUserDetail, AdminUserUpdate, MatchSummary, UserListResponse, UserResponse
from app.services import accounts, reporting
from app.services.cache import invalidate
from app.api.dependencies import require_permission

logger = logging.getLogger(__name__)

router = APIRouter()

VIEW_STATISTICS = "view_statistics"
MANAGE_USERS = "manage_users"


async def _get_user_or_404(db: AsyncSession, user_id: int):
    user = await accounts.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("/stats", response_model=UserStatsResponse)
async def get_stats(
    db: AsyncSession = Depends(get_db),
    admin: Admin = Depends(require_permission(VIEW_STATISTICS))
):
    """
    Member totals, counts per status and registrations per day for the
    last seven days (oldest first). Cached briefly in Redis.
    """
    return await reporting.cached_user_stats(db)


@router.get("/users", response_model=UserListResponse)
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str = Query(""),
    db: AsyncSession = Depends(get_db),
    admin: Admin = Depends(require_permission(MANAGE_USERS))
):
    users, total, total_pages = await reporting.list_users(db, page, limit, search)
    return UserListResponse(
        users=[UserResponse.from_user(u) for u in users],
        total_pages=total_pages,
        current_page=page,
        total_users=total,
    )


@router.get("/users/{user_id}", response_model=AdminUserDetail)
async def get_user_detail(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    admin: Admin = Depends(require_permission(MANAGE_USERS))
):
    """Single member with their matches resolved to id, email and name."""
    user = await _get_user_or_404(db, user_id)
    matched = await reporting.match_summaries(db, user_id)
    detail = AdminUserDetail.from_user(user)
    detail.matches = [
        MatchSummary(id=m.id, email=m.email, first_name=m.first_name, last_name=m.last_name)
        for m in matched
    ]
    return detail


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    update_data: AdminUserUpdate,
    db: AsyncSession = Depends(get_db),
    admin: Admin = Depends(require_permission(MANAGE_USERS))
):
    """
    Partially overwrite email, status, profile fields or preferences.
    """
    if update_data.email is not None and "@" not in update_data.email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email format")

    user = await _get_user_or_404(db, user_id)
    user = await accounts.update_user_fields(db, user, update_data.model_dump(exclude_none=True))
    logger.info(f"Admin {admin.id} updated user {user_id}")
    await invalidate(reporting.STATS_CACHE_KEY)
    return UserResponse.from_user(user)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    admin: Admin = Depends(require_permission(MANAGE_USERS))
):
    await accounts.delete_user(db, user_id)
    logger.info(f"Admin {admin.id} deleted user {user_id}")
    await invalidate(reporting.STATS_CACHE_KEY)
    return MessageResponse(message="User deleted successfully")
