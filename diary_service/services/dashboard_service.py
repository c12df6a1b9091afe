from __future__ import annotations

import asyncio
import datetime as dt
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..auth import AuthContext
from ..redis_client import dashboard_cache, generation_key, summary_key, workouts_by_date_key
from ..repositories.exercise_repository import ExerciseRepository
from ..repositories.workout_repository import WorkoutRepository
from ..schemas.dashboard import RecentWorkout, WorkoutSummary
from ..schemas.exercise import ExerciseResponse
from ..schemas.workout import WorkoutWithExercises
from .exercise_service import to_exercise_response

logger = structlog.get_logger(__name__)

SUMMARY_WINDOW_DAYS = 30
RECENT_WORKOUTS_LIMIT = 5


def _as_date(day: dt.date | str) -> dt.date:
    if isinstance(day, dt.datetime):
        return day.date()
    if isinstance(day, dt.date):
        return day
    return dt.date.fromisoformat(day)


def utc_today() -> dt.date:
    return dt.datetime.now(dt.UTC).date()


def fold_workout_rows(rows: Iterable[Mapping[str, Any]]) -> list[WorkoutWithExercises]:
    """Fold flat left-join rows into workout -> exercises -> sets trees.

    Workouts keep the order in which they first appear. A row with no
    workout exercise (or no exercise) only registers its workout, and a row
    with no set only registers its exercise. Children are sorted by
    ``(order, id)`` and ``(set_number, id)``.
    """
    workouts: dict[int, dict[str, Any]] = {}

    for row in rows:
        workout_id = row["workout_id"]
        workout = workouts.get(workout_id)
        if workout is None:
            workout = workouts[workout_id] = {
                "id": workout_id,
                "name": row["workout_name"],
                "date": row["workout_date"],
                "notes": row["workout_notes"],
                "exercises": {},
            }

        workout_exercise_id = row["workout_exercise_id"]
        if workout_exercise_id is None or row["exercise_id"] is None:
            continue

        entry = workout["exercises"].get(workout_exercise_id)
        if entry is None:
            entry = workout["exercises"][workout_exercise_id] = {
                "id": workout_exercise_id,
                "order": row["exercise_order"],
                "exercise": {
                    "id": row["exercise_id"],
                    "name": row["exercise_name"],
                    "primary_muscle": row["primary_muscle"],
                },
                "sets": {},
            }

        set_id = row["set_id"]
        if set_id is None:
            continue
        entry["sets"].setdefault(
            set_id,
            {
                "id": set_id,
                "set_number": row["set_number"],
                "weight": row["weight"],
                "reps": row["reps"],
                "notes": row["set_notes"],
            },
        )

    folded = []
    for workout in workouts.values():
        exercises = sorted(workout["exercises"].values(), key=lambda e: (e["order"], e["id"]))
        for entry in exercises:
            entry["sets"] = sorted(entry["sets"].values(), key=lambda s: (s["set_number"], s["id"]))
        folded.append(WorkoutWithExercises.model_validate({**workout, "exercises": exercises}))
    return folded


async def get_workouts_by_date(db: AsyncSession, user_id: str, day: dt.date | str) -> list[WorkoutWithExercises]:
    rows = await WorkoutRepository.fetch_workout_rows(db, user_id, day=_as_date(day))
    return fold_workout_rows(rows)


async def get_workout(db: AsyncSession, user_id: str, workout_id: int) -> WorkoutWithExercises | None:
    rows = await WorkoutRepository.fetch_workout_rows(db, user_id, workout_id=workout_id)
    folded = fold_workout_rows(rows)
    return folded[0] if folded else None


async def _in_session(
    session_factory: async_sessionmaker[AsyncSession],
    query: Callable[..., Awaitable[Any]],
    *args: Any,
) -> Any:
    async with session_factory() as session:
        return await query(session, *args)


async def get_workout_summary(
    session_factory: async_sessionmaker[AsyncSession],
    user_id: str,
    today: dt.date | None = None,
) -> WorkoutSummary:
    """Dashboard statistics for one user.

    The four sub-queries are independent and run concurrently, each on its
    own session. The exercise and set counts cover workouts dated on or
    after ``today - 30 days``. If any sub-query fails the others are
    cancelled and its exception is raised.
    """
    today = today or utc_today()
    window_start = today - dt.timedelta(days=SUMMARY_WINDOW_DAYS)

    try:
        async with asyncio.TaskGroup() as group:
            total_workouts = group.create_task(
                _in_session(session_factory, WorkoutRepository.count_workouts, user_id)
            )
            recent_rows = group.create_task(
                _in_session(session_factory, WorkoutRepository.recent_workouts, user_id, RECENT_WORKOUTS_LIMIT)
            )
            total_exercises = group.create_task(
                _in_session(session_factory, WorkoutRepository.count_workout_exercises_since, user_id, window_start)
            )
            total_sets = group.create_task(
                _in_session(session_factory, WorkoutRepository.count_sets_since, user_id, window_start)
            )
    except ExceptionGroup as failed:
        raise failed.exceptions[0] from None

    recent = [RecentWorkout.model_validate(dict(row)) for row in recent_rows.result()]
    return WorkoutSummary(
        total_workouts=total_workouts.result(),
        total_exercises=total_exercises.result(),
        total_sets=total_sets.result(),
        recent_workouts=recent,
        last_workout_date=recent[0].date if recent else None,
    )


async def list_exercises(db: AsyncSession, user_id: str) -> list[ExerciseResponse]:
    exercises = await ExerciseRepository.list_visible(db, user_id)
    return [to_exercise_response(ex) for ex in exercises]


class DashboardService:
    """Read side used by the routers: identity gate plus Redis caching.

    Anonymous callers get empty results rather than an error.
    """

    def __init__(
        self,
        db: AsyncSession,
        session_factory: async_sessionmaker[AsyncSession],
        auth: AuthContext,
    ):
        self.db = db
        self.session_factory = session_factory
        self.auth = auth

    async def workouts_by_date(self, day: dt.date) -> list[WorkoutWithExercises]:
        if not self.auth.is_authenticated:
            return []
        user_id = self.auth.user_id

        # Taken before the query, so a write landing meanwhile leaves this put under a key nobody reads.
        generation = await dashboard_cache.generation(generation_key(user_id))
        key = workouts_by_date_key(user_id, generation, day) if generation is not None else None
        if key is not None:
            cached = await dashboard_cache.fetch(key)
            if cached is not None:
                return [WorkoutWithExercises.model_validate(item) for item in cached]

        workouts = await get_workouts_by_date(self.db, user_id, day)
        if key is not None:
            await dashboard_cache.put(key, [w.model_dump(mode="json") for w in workouts])
        logger.debug("dashboard_workouts_loaded", user_id=user_id, date=day.isoformat(), count=len(workouts))
        return workouts

    async def summary(self, today: dt.date | None = None) -> WorkoutSummary | None:
        if not self.auth.is_authenticated:
            return None
        user_id = self.auth.user_id
        today = today or utc_today()

        generation = await dashboard_cache.generation(generation_key(user_id))
        key = summary_key(user_id, generation, today) if generation is not None else None
        if key is not None:
            cached = await dashboard_cache.fetch(key)
            if cached is not None:
                return WorkoutSummary.model_validate(cached)

        summary = await get_workout_summary(self.session_factory, user_id, today)
        if key is not None:
            await dashboard_cache.put(key, summary.model_dump(mode="json"))
        return summary

    async def workout(self, workout_id: int) -> WorkoutWithExercises | None:
        if not self.auth.is_authenticated:
            return None
        return await get_workout(self.db, self.auth.user_id, workout_id)

    async def exercises(self) -> list[ExerciseResponse]:
        if not self.auth.is_authenticated:
            return []
        return await list_exercises(self.db, self.auth.user_id)
