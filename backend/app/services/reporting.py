"""
Reporting Service
Aggregate statistics and searchable listings over member accounts.
"""

import math
from datetime import datetime, date, time, timedelta, timezone
from typing import List, Optional, Tuple
from zoneinfo import ZoneInfo

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.user import User, AccountStatus
from app.models.matches import Match
from app.services.cache import cache_response

STATS_CACHE_KEY = "admin:stats"
TREND_DAYS = 7
END_OF_DAY = time(23, 59, 59, 999000)


def day_window(day: date, tz: ZoneInfo) -> Tuple[datetime, datetime]:
    """
    [00:00:00.000, 23:59:59.999] of a local calendar day, expressed as naive
    UTC datetimes to compare against stored timestamps.
    """
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day, END_OF_DAY, tzinfo=tz)
    return (
        start.astimezone(timezone.utc).replace(tzinfo=None),
        end.astimezone(timezone.utc).replace(tzinfo=None),
    )


async def user_stats(db: AsyncSession, now: Optional[datetime] = None, tz_name: Optional[str] = None) -> dict:
    """Total members, members per status and a 7-day registration trend (oldest first)."""
    tz = ZoneInfo(tz_name or settings.stats_timezone)
    local_today = (now.astimezone(tz) if now else datetime.now(tz)).date()

    total_users = (await db.execute(select(func.count(User.id)))).scalar() or 0

    users_by_status = {status.value: 0 for status in AccountStatus}
    rows = await db.execute(select(User.status, func.count(User.id)).group_by(User.status))
    for status, count in rows.all():
        bucket = status.value if status else AccountStatus.ACTIVE.value
        users_by_status[bucket] = users_by_status.get(bucket, 0) + count

    daily_trends = []
    for offset in range(TREND_DAYS - 1, -1, -1):
        day = local_today - timedelta(days=offset)
        start, end = day_window(day, tz)
        count = (await db.execute(
            select(func.count(User.id)).where(User.created_at >= start, User.created_at <= end)
        )).scalar() or 0
        daily_trends.append({"date": day.isoformat(), "count": count})

    return {
        "total_users": total_users,
        "users_by_status": users_by_status,
        "daily_trends": daily_trends,
    }


@cache_response(STATS_CACHE_KEY)
async def cached_user_stats(db: AsyncSession) -> dict:
    return await user_stats(db)


def _search_filter(search: str):
    term = search.strip().lower()
    return or_(
        func.lower(User.email).contains(term, autoescape=True),
        func.lower(User.first_name).contains(term, autoescape=True),
        func.lower(User.last_name).contains(term, autoescape=True),
    )


async def list_users(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 10,
    search: str = "",
) -> Tuple[List[User], int, int]:
    """
    Newest members first, optionally filtered by a case-insensitive substring
    of email, first name or last name. Returns (users, total, total_pages).
    """
    query = select(User)
    count_query = select(func.count(User.id))
    if search and search.strip():
        condition = _search_filter(search)
        query = query.where(condition)
        count_query = count_query.where(condition)

    total = (await db.execute(count_query)).scalar() or 0
    result = await db.execute(
        query.order_by(User.created_at.desc(), User.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    total_pages = math.ceil(total / page_size) if page_size else 0
    return list(result.scalars().all()), total, total_pages


async def match_summaries(db: AsyncSession, user_id: int) -> List[User]:
    """Users matched with `user_id`, for the admin detail view."""
    result = await db.execute(
        select(User)
        .join(Match, Match.matched_user_id == User.id)
        .where(Match.user_id == user_id)
        .order_by(Match.matched_at, Match.id)
    )
    return list(result.scalars().all())
