"""
Response Cache
Short-lived Redis cache for expensive read-only aggregates.
Cache failures never fail the request; the value is computed live instead.
"""

import json
import logging
from functools import wraps
from typing import Callable, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from app.config import settings

logger = logging.getLogger(__name__)


def cache_response(key: str, ttl_seconds: Optional[Callable[[], int]] = None):
    """
    Cache the JSON-serializable result of an async function under `key`.
    `ttl_seconds` is read on every call; a TTL of 0 bypasses Redis entirely.
    """
    ttl_getter = ttl_seconds or (lambda: settings.stats_cache_ttl)

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            ttl = ttl_getter()
            if ttl <= 0:
                return await func(*args, **kwargs)

            cache_key = f"cache:{key}"
            try:
                r = redis.from_url(settings.redis_url, decode_responses=True)
                try:
                    cached = await r.get(cache_key)
                finally:
                    await r.aclose()
                if cached:
                    return json.loads(cached)
            except (RedisError, OSError) as e:
                logger.warning(f"Cache read error for {cache_key}: {e}")

            result = await func(*args, **kwargs)

            try:
                r = redis.from_url(settings.redis_url, decode_responses=True)
                try:
                    await r.setex(cache_key, ttl, json.dumps(result))
                finally:
                    await r.aclose()
            except (RedisError, OSError) as e:
                logger.warning(f"Cache write error for {cache_key}: {e}")

            return result
        return wrapper
    return decorator


async def invalidate(key: str) -> None:
    """Drop a cached entry, e.g. after a write that changes the aggregate."""
    if settings.stats_cache_ttl <= 0:
        return
    try:
        r = redis.from_url(settings.redis_url, decode_responses=True)
        try:
            await r.delete(f"cache:{key}")
        finally:
            await r.aclose()
    except (RedisError, OSError) as e:
        logger.warning(f"Cache invalidation error for cache:{key}: {e}")
