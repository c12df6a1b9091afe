"""Redis client utilities for diary-service."""

from __future__ import annotations

import datetime as dt
from typing import Optional

import structlog
from backend_common.cache import CacheCounters, JsonCache
from redis.asyncio import Redis

from .config import get_settings
from .metrics import DASHBOARD_CACHE_ERRORS_TOTAL, DASHBOARD_CACHE_HITS_TOTAL, DASHBOARD_CACHE_MISSES_TOTAL

logger = structlog.get_logger(__name__)

redis_client: Optional[Redis] = None


def generation_key(user_id: str) -> str:
    return f"dashboard:generation:{user_id}"


# The generation and date are always the last two segments, so a user id
# containing ':' cannot collide with another user's keys.
def workouts_by_date_key(user_id: str, generation: int, day: dt.date) -> str:
    return f"dashboard:workouts:{user_id}:g{generation}:{day.isoformat()}"


def summary_key(user_id: str, generation: int, today: dt.date) -> str:
    # Keyed by day so the 30-day window never outlives the date it was computed for.
    return f"dashboard:summary:{user_id}:g{generation}:{today.isoformat()}"


async def init_redis() -> None:
    global redis_client

    settings = get_settings()
    if not settings.DIARY_REDIS_ENABLED:
        logger.info("diary_redis_disabled")
        return

    try:
        redis_client = Redis(
            host=settings.DIARY_REDIS_HOST,
            port=settings.DIARY_REDIS_PORT,
            db=settings.DIARY_REDIS_DB,
            password=settings.DIARY_REDIS_PASSWORD,
            encoding="utf-8",
            decode_responses=True,
            health_check_interval=30,
        )
        await redis_client.ping()
        logger.info(
            "diary_redis_connected",
            host=settings.DIARY_REDIS_HOST,
            port=settings.DIARY_REDIS_PORT,
            db=settings.DIARY_REDIS_DB,
        )
    except Exception as exc:
        logger.error("diary_redis_connection_failed", error=str(exc))
        redis_client = None


async def get_redis() -> Optional[Redis]:
    return redis_client


async def close_redis() -> None:
    global redis_client

    if redis_client is None:
        return

    try:
        await redis_client.aclose()
        logger.info("diary_redis_closed")
    except Exception as exc:
        logger.warning("diary_redis_close_failed", error=str(exc))
    finally:
        redis_client = None


dashboard_cache = JsonCache(
    get_client=get_redis,
    counters=CacheCounters(
        hits=DASHBOARD_CACHE_HITS_TOTAL,
        misses=DASHBOARD_CACHE_MISSES_TOTAL,
        errors=DASHBOARD_CACHE_ERRORS_TOTAL,
    ),
    ttl_seconds=get_settings().DASHBOARD_CACHE_TTL_SECONDS,
)


async def invalidate_dashboard_cache(user_id: str) -> None:
    """Move the user to a new generation; entries cached under the old one expire unread."""
    await dashboard_cache.bump(generation_key(user_id))
    logger.debug("dashboard_cache_invalidated", user_id=user_id)
