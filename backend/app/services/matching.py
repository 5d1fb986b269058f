"""
Matching Service
Reciprocal-like state machine between members.

For any ordered pair (A, B) the relation is one of: none, A likes B, or
matched. A like from B to A while A already likes B promotes the pair to a
match: both like edges are retracted and a match row is written for each
side. `likes_count` always equals the number of pending inbound likes.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy import select, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.models.matches import Like, Match
from app.services.accounts import UserNotFoundError
from app.utils.dates import birth_date_bounds

logger = logging.getLogger(__name__)

DEFAULT_MIN_AGE = 0
DEFAULT_MAX_AGE = 100


class MatchingError(Exception):
    """Base class for rejected like operations."""


class SelfLikeError(MatchingError):
    pass


class AlreadyLikedError(MatchingError):
    pass


class AlreadyMatchedError(MatchingError):
    pass


@dataclass
class LikeResult:
    is_match: bool
    likes_count: int

    @property
    def message(self) -> str:
        return "Match created!" if self.is_match else "Profile liked"


async def _lock_pair(db: AsyncSession, first_id: int, second_id: int) -> Dict[int, User]:
    """
    Load and row-lock both users in ascending id order, so concurrent likes
    on the same unordered pair serialize instead of interleaving.
    """
    result = await db.execute(
        select(User)
        .where(User.id.in_([first_id, second_id]))
        .order_by(User.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return {user.id: user for user in result.scalars().all()}


async def _find_like(db: AsyncSession, liker_id: int, liked_id: int) -> Optional[Like]:
    result = await db.execute(
        select(Like).where(Like.liker_id == liker_id, Like.liked_id == liked_id)
    )
    return result.scalar_one_or_none()


async def is_matched(db: AsyncSession, user_id: int, other_id: int) -> bool:
    result = await db.execute(
        select(Match.id).where(Match.user_id == user_id, Match.matched_user_id == other_id)
    )
    return result.first() is not None


async def like(db: AsyncSession, actor_id: int, target_id: int) -> LikeResult:
    """Record that `actor_id` likes `target_id`, promoting to a match when reciprocated."""
    if actor_id == target_id:
        raise SelfLikeError("You cannot like your own profile")

    users = await _lock_pair(db, actor_id, target_id)
    actor = users.get(actor_id)
    target = users.get(target_id)
    if actor is None or target is None:
        raise UserNotFoundError("User not found")

    if await _find_like(db, actor_id, target_id):
        raise AlreadyLikedError("Profile already liked")
    if await is_matched(db, actor_id, target_id):
        raise AlreadyMatchedError("Already matched with this profile")

    reverse = await _find_like(db, target_id, actor_id)
    if reverse is None:
        db.add(Like(liker_id=actor_id, liked_id=target_id))
        target.likes_count = (target.likes_count or 0) + 1
    else:
        # Promote: the new like is retracted immediately and the reverse like goes too
        await db.delete(reverse)
        db.add(Match(user_id=actor_id, matched_user_id=target_id))
        db.add(Match(user_id=target_id, matched_user_id=actor_id))
        actor.likes_count = max((actor.likes_count or 0) - 1, 0)

    try:
        await db.commit()
    except IntegrityError:
        # A concurrent request wrote the same edge first
        await db.rollback()
        raise AlreadyLikedError("Profile already liked")

    result = LikeResult(is_match=reverse is not None, likes_count=target.likes_count)
    if result.is_match:
        logger.info(f"Match created between users {actor_id} and {target_id}")
    return result


async def potential_matches(
    db: AsyncSession,
    actor: User,
    min_age: int = DEFAULT_MIN_AGE,
    max_age: int = DEFAULT_MAX_AGE,
    religion: Optional[str] = None,
    today: Optional[date] = None,
) -> List[User]:
    """
    Everyone except the actor and the people the actor already likes or is
    matched with, whose derived age is within [min_age, max_age] and, when
    given, whose religion equals `religion`. Store order, no ranking.
    """
    liked = select(Like.liked_id).where(Like.liker_id == actor.id)
    matched = select(Match.matched_user_id).where(Match.user_id == actor.id)
    earliest, latest = birth_date_bounds(min_age, max_age, today)

    query = select(User).where(
        User.id != actor.id,
        User.id.not_in(liked),
        User.id.not_in(matched),
        User.date_of_birth >= earliest,
        User.date_of_birth <= latest,
    )
    if religion:
        query = query.where(User.religion == religion)

    result = await db.execute(query.order_by(User.id))
    return list(result.scalars().all())


async def liked_profiles(db: AsyncSession, actor: User) -> List[User]:
    """Users the actor has liked without a reciprocation yet, oldest like first."""
    result = await db.execute(
        select(User)
        .join(Like, and_(Like.liked_id == User.id, Like.liker_id == actor.id))
        .order_by(Like.created_at, Like.id)
    )
    return list(result.scalars().all())


async def matched_profiles(db: AsyncSession, actor: User) -> List[User]:
    """Users the actor is matched with, oldest match first."""
    result = await db.execute(
        select(User)
        .join(Match, and_(Match.matched_user_id == User.id, Match.user_id == actor.id))
        .order_by(Match.matched_at, Match.id)
    )
    return list(result.scalars().all())
