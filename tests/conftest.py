import pytest
from backend_common.database import create_async_engine_and_session
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select

from diary_service import models
from diary_service.database import Base, get_session_factory
from diary_service.schemas.workout import WorkoutCreate
from diary_service.seed import seed_system_exercises
from diary_service.services.workout_service import WorkoutService

USER_ID = "user-alice"
OTHER_USER_ID = "user-bob"


def auth_headers(user_id: str = USER_ID) -> dict[str, str]:
    return {"X-User-Id": user_id}


@pytest.fixture
async def session_factory(tmp_path):
    engine, factory = create_async_engine_and_session(
        f"sqlite+aiosqlite:///{tmp_path / 'diary.db'}",
        autoflush=False,
        expire_on_commit=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with factory() as db:
        await seed_system_exercises(db)

    yield factory

    await engine.dispose()


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    from diary_service.main import app

    app.dependency_overrides[get_session_factory] = lambda: session_factory
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def exercise_ids(session_factory) -> dict[str, int]:
    """System catalog ids by name."""
    async with session_factory() as session:
        result = await session.execute(
            select(models.Exercise.name, models.Exercise.id).where(models.Exercise.user_id.is_(None))
        )
        return {name: exercise_id for name, exercise_id in result.all()}


@pytest.fixture
def make_workout(session_factory):
    async def _make(user_id: str, day, exercises=(), name: str | None = None):
        payload = WorkoutCreate.model_validate({"name": name, "date": day, "exercises": list(exercises)})
        async with session_factory() as session:
            return await WorkoutService(session, user_id).create_workout(payload)

    return _make


@pytest.fixture
def count_rows(session_factory):
    async def _count(model) -> int:
        async with session_factory() as session:
            result = await session.execute(select(model))
            return len(result.scalars().all())

    return _count
