import datetime as dt

import pytest
from conftest import USER_ID

from backend_common.cache import CacheCounters, JsonCache
from diary_service import redis_client
from diary_service.auth import AuthContext
from diary_service.schemas.workout import WorkoutUpdate
from diary_service.services import dashboard_service
from diary_service.services.dashboard_service import DashboardService
from diary_service.services.workout_service import WorkoutService

DAY = dt.date(2026, 8, 8)


class InMemoryRedis:
    """Just the calls JsonCache makes."""

    def __init__(self):
        self.store: dict[str, str] = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value

    async def incr(self, key):
        value = int(self.store.get(key, 0)) + 1
        self.store[key] = str(value)
        return value


class BrokenRedis:
    async def get(self, key):
        raise ConnectionError("redis down")

    async def set(self, key, value, ex=None):
        raise ConnectionError("redis down")

    async def incr(self, key):
        raise ConnectionError("redis down")


class Counter:
    def __init__(self):
        self.value = 0

    def inc(self):
        self.value += 1


@pytest.fixture
def fake_redis(monkeypatch):
    fake = InMemoryRedis()
    monkeypatch.setattr(redis_client, "redis_client", fake)
    return fake


async def rename(session_factory, user_id, workout_id, name):
    async with session_factory() as write_db:
        await WorkoutService(write_db, user_id).update_workout(workout_id, WorkoutUpdate(name=name))


@pytest.mark.asyncio
async def test_json_cache_counts_hits_and_misses():
    fake = InMemoryRedis()
    hits, misses = Counter(), Counter()

    async def get_redis():
        return fake

    cache = JsonCache(get_client=get_redis, counters=CacheCounters(hits=hits, misses=misses))

    assert await cache.fetch("k") is None
    await cache.put("k", {"a": 1})
    assert await cache.fetch("k") == {"a": 1}
    assert (hits.value, misses.value) == (1, 1)


@pytest.mark.asyncio
async def test_generation_starts_at_zero_and_bumps():
    fake = InMemoryRedis()

    async def get_redis():
        return fake

    cache = JsonCache(get_client=get_redis)

    assert await cache.generation("gen") == 0
    await cache.bump("gen")
    await cache.bump("gen")
    assert await cache.generation("gen") == 2


@pytest.mark.asyncio
async def test_cache_errors_never_propagate():
    errors = Counter()

    async def get_redis():
        return BrokenRedis()

    cache = JsonCache(get_client=get_redis, counters=CacheCounters(errors=errors))

    assert await cache.fetch("k") is None
    await cache.put("k", [1])
    assert await cache.generation("gen") is None
    await cache.bump("gen")
    assert errors.value == 4


@pytest.mark.asyncio
async def test_cache_is_a_no_op_without_redis():
    async def get_redis():
        return None

    cache = JsonCache(get_client=get_redis)

    await cache.put("k", [1])
    assert await cache.fetch("k") is None
    assert await cache.generation("gen") is None
    await cache.bump("gen")


@pytest.mark.asyncio
async def test_dashboard_reads_are_cached_and_dropped_after_writes(db, session_factory, make_workout, fake_redis):
    created = await make_workout(USER_ID, DAY, name="Original")
    dashboard = DashboardService(db, session_factory, AuthContext(user_id=USER_ID))
    generation = await redis_client.dashboard_cache.generation(redis_client.generation_key(USER_ID))

    first = await dashboard.workouts_by_date(DAY)
    await dashboard.summary(today=DAY)
    assert redis_client.workouts_by_date_key(USER_ID, generation, DAY) in fake_redis.store
    assert redis_client.summary_key(USER_ID, generation, DAY) in fake_redis.store

    cached = await dashboard.workouts_by_date(DAY)
    assert cached == first

    await rename(session_factory, USER_ID, created.id, "Renamed")

    assert await redis_client.dashboard_cache.generation(redis_client.generation_key(USER_ID)) == generation + 1
    (fresh,) = await dashboard.workouts_by_date(DAY)
    assert fresh.name == "Renamed"


@pytest.mark.asyncio
@pytest.mark.parametrize("user_id", ["user[1]", "user*", "user?x", "user\\x"])
async def test_writes_invalidate_users_with_pattern_characters_in_their_id(
    db, session_factory, make_workout, fake_redis, user_id
):
    created = await make_workout(user_id, DAY, name="Original")
    dashboard = DashboardService(db, session_factory, AuthContext(user_id=user_id))

    (first,) = await dashboard.workouts_by_date(DAY)
    assert first.name == "Original"

    await rename(session_factory, user_id, created.id, "Renamed")

    (fresh,) = await dashboard.workouts_by_date(DAY)
    assert fresh.name == "Renamed"


@pytest.mark.asyncio
async def test_writes_leave_users_with_prefix_sharing_ids_cached(db, session_factory, make_workout, fake_redis):
    neighbour = f"{USER_ID}:2"
    mine = await make_workout(USER_ID, DAY, name="Mine")
    await make_workout(neighbour, DAY, name="Theirs")
    neighbour_generation = await redis_client.dashboard_cache.generation(redis_client.generation_key(neighbour))

    await DashboardService(db, session_factory, AuthContext(user_id=neighbour)).workouts_by_date(DAY)
    await rename(session_factory, USER_ID, mine.id, "Mine, renamed")

    assert await redis_client.dashboard_cache.generation(redis_client.generation_key(neighbour)) == neighbour_generation
    assert redis_client.workouts_by_date_key(neighbour, neighbour_generation, DAY) in fake_redis.store


@pytest.mark.asyncio
async def test_read_racing_a_write_does_not_leave_a_stale_entry(
    db, session_factory, make_workout, fake_redis, monkeypatch
):
    created = await make_workout(USER_ID, DAY, name="Original")
    dashboard = DashboardService(db, session_factory, AuthContext(user_id=USER_ID))
    load = dashboard_service.get_workouts_by_date

    async def load_then_let_a_write_commit(session, user_id, day):
        rows = await load(session, user_id, day)
        await rename(session_factory, USER_ID, created.id, "Renamed")
        return rows

    monkeypatch.setattr(dashboard_service, "get_workouts_by_date", load_then_let_a_write_commit)
    (raced,) = await dashboard.workouts_by_date(DAY)
    assert raced.name == "Original"

    monkeypatch.setattr(dashboard_service, "get_workouts_by_date", load)
    (fresh,) = await dashboard.workouts_by_date(DAY)
    assert fresh.name == "Renamed"
