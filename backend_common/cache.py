"""Best-effort JSON cache on top of an optional async Redis client."""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class CacheCounters:
    """Prometheus counters for cache outcomes. Any of them may be left unset."""

    hits: Any = None
    misses: Any = None
    errors: Any = None

    def record(self, outcome: str) -> None:
        counter = getattr(self, outcome, None)
        if counter is not None:
            counter.inc()


class JsonCache:
    """
    Values are stored as JSON strings with a TTL. Invalidation is by
    generation: readers embed a per-scope counter in their keys and writers
    bump it, so entries from before a write are simply never looked up again.

    When ``get_client`` yields None every call is a no-op. Redis failures are
    logged and counted, never raised, so a broken cache can only cost a trip
    to the database.

    Usage:
        cache = JsonCache(get_client=get_redis, counters=CacheCounters(hits=HITS, misses=MISSES))
        generation = await cache.generation("dashboard:generation:u1")
        await cache.put(f"dashboard:summary:u1:g{generation}:2026-01-01", {"total_workouts": 3})
        await cache.bump("dashboard:generation:u1")
    """

    def __init__(
        self,
        get_client: Callable[[], Awaitable[Any]],
        counters: CacheCounters | None = None,
        ttl_seconds: int = 300,
    ):
        self._get_client = get_client
        self._counters = counters or CacheCounters()
        self._ttl_seconds = ttl_seconds

    def _failed(self, operation: str, target: str) -> None:
        self._counters.record("errors")
        logger.warning("cache_operation_failed", operation=operation, target=target, exc_info=True)

    async def fetch(self, key: str) -> Any:
        """Decoded value, or None on a miss, without a client, or on error."""
        client = await self._get_client()
        if client is None:
            return None
        try:
            raw = await client.get(key)
        except Exception:
            self._failed("get", key)
            return None
        if raw is None:
            self._counters.record("misses")
            return None
        self._counters.record("hits")
        return json.loads(raw)

    async def put(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        client = await self._get_client()
        if client is None:
            return
        try:
            await client.set(key, json.dumps(value), ex=ttl_seconds or self._ttl_seconds)
        except Exception:
            self._failed("set", key)

    async def generation(self, counter_key: str) -> int | None:
        """Current value of a write counter (0 if never bumped), or None when caching is off."""
        client = await self._get_client()
        if client is None:
            return None
        try:
            raw = await client.get(counter_key)
        except Exception:
            self._failed("generation", counter_key)
            return None
        return int(raw or 0)

    async def bump(self, counter_key: str) -> None:
        """Advance a write counter so keys built from the old value are never read again."""
        client = await self._get_client()
        if client is None:
            return
        try:
            await client.incr(counter_key)
        except Exception:
            self._failed("bump", counter_key)
