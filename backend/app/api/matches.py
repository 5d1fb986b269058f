"""
Matches Router
Browse candidates, like profiles and list likes/matches.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.user import User
from app.schemas.matches import (
    LikedProfileCard,
    LikedProfilesResponse,
    LikeResponse,
    MutualMatchesResponse,
    PotentialMatchesResponse,
    ProfileCard,
)
from app.services import matching
from app.api.dependencies import get_current_user

router = APIRouter()


@router.get("/potential", response_model=PotentialMatchesResponse)
async def get_potential_matches(
    min_age: int = Query(matching.DEFAULT_MIN_AGE, alias="minAge", ge=0, le=150),
    max_age: int = Query(matching.DEFAULT_MAX_AGE, alias="maxAge", ge=0, le=150),
    religion: Optional[str] = Query(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Profiles the member has neither liked nor matched, filtered by derived
    age range and, optionally, religion.
    """
    candidates = await matching.potential_matches(db, user, min_age, max_age, religion)
    return PotentialMatchesResponse(matches=[ProfileCard.from_user(c) for c in candidates])


@router.post("/like/{user_id}", response_model=LikeResponse)
async def like_profile(
    user_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Like a profile. Reports a match when the other member already liked back."""
    result = await matching.like(db, user.id, user_id)
    return LikeResponse(
        message=result.message,
        is_match=result.is_match,
        likes_count=result.likes_count,
    )


@router.get("/liked", response_model=LikedProfilesResponse)
async def get_liked_profiles(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    liked = await matching.liked_profiles(db, user)
    return LikedProfilesResponse(
        liked_profiles=[LikedProfileCard.from_user(u) for u in liked],
        total_likes=len(liked),
    )


@router.get("/mutual", response_model=MutualMatchesResponse)
async def get_mutual_matches(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    matched = await matching.matched_profiles(db, user)
    return MutualMatchesResponse(
        matches=[ProfileCard.from_user(u) for u in matched],
        total_matches=len(matched),
    )
