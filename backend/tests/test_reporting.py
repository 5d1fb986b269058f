from datetime import datetime, timezone, time
from zoneinfo import ZoneInfo

from app.config import settings
from app.services import reporting
from app.services.cache import cache_response


async def test_user_stats_trend_window_is_seven_days(db, make_member):
    now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
    await make_member(created_at=datetime(2026, 10, 19, 0, 30))
    await make_member(created_at=datetime(2026, 10, 13, 0, 0))
    await make_member(created_at=datetime(2026, 10, 12, 23, 59, 59))

    stats = await reporting.user_stats(db, now=now, tz_name="UTC")

    assert stats["total_users"] == 3
    trends = stats["daily_trends"]
    assert [t["date"] for t in trends] == [f"2026-10-{d}" for d in range(13, 20)]
    assert trends[0]["count"] == 1
    assert trends[-1]["count"] == 1
    assert sum(t["count"] for t in trends) == 2


async def test_user_stats_uses_local_calendar_days(db, make_member):
    now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
    # 20:00 UTC on the 18th is already the 19th in India
    await make_member(created_at=datetime(2026, 10, 18, 20, 0))

    utc = await reporting.user_stats(db, now=now, tz_name="UTC")
    ist = await reporting.user_stats(db, now=now, tz_name="Asia/Kolkata")

    assert utc["daily_trends"][-2] == {"date": "2026-10-18", "count": 1}
    assert ist["daily_trends"][-1] == {"date": "2026-10-19", "count": 1}


def test_day_window_converts_to_naive_utc():
    start, end = reporting.day_window(datetime(2026, 10, 19).date(), ZoneInfo("Asia/Kolkata"))

    assert start == datetime(2026, 10, 18, 18, 30)
    assert end.date() == datetime(2026, 10, 19).date()
    assert end.time() == time(18, 29, 59, 999000)
    assert start.tzinfo is None


async def test_list_users_page_past_the_end(db, make_member):
    for _ in range(3):
        await make_member()

    users, total, total_pages = await reporting.list_users(db, page=5, page_size=2)

    assert users == []
    assert total == 3
    assert total_pages == 2


async def test_cache_falls_back_when_redis_is_unreachable(monkeypatch):
    monkeypatch.setattr(settings, "redis_url", "redis://127.0.0.1:1/0")
    calls = []

    @cache_response("test:unreachable", ttl_seconds=lambda: 30)
    async def compute():
        calls.append(1)
        return {"value": len(calls)}

    assert await compute() == {"value": 1}
    assert await compute() == {"value": 2}


async def test_cache_disabled_with_zero_ttl():
    calls = []

    @cache_response("test:disabled", ttl_seconds=lambda: 0)
    async def compute():
        calls.append(1)
        return len(calls)

    await compute()
    await compute()
    assert len(calls) == 2
