"""System exercise catalog.

Run ``python -m diary_service.seed`` to add any missing system entries to an
existing database. The initial migration inserts the same list.
"""

import asyncio

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Exercise

logger = structlog.get_logger(__name__)

SYSTEM_EXERCISES: list[dict] = [
    {"name": "Back Squat", "primary_muscle": "quadriceps", "secondary_muscles": ["glutes", "hamstrings", "lower back"]},
    {"name": "Front Squat", "primary_muscle": "quadriceps", "secondary_muscles": ["glutes", "upper back"]},
    {"name": "Deadlift", "primary_muscle": "hamstrings", "secondary_muscles": ["glutes", "lower back", "forearms"]},
    {"name": "Romanian Deadlift", "primary_muscle": "hamstrings", "secondary_muscles": ["glutes", "lower back"]},
    {"name": "Bench Press", "primary_muscle": "chest", "secondary_muscles": ["triceps", "front delts"]},
    {"name": "Incline Bench Press", "primary_muscle": "chest", "secondary_muscles": ["front delts", "triceps"]},
    {"name": "Overhead Press", "primary_muscle": "shoulders", "secondary_muscles": ["triceps", "upper back"]},
    {"name": "Barbell Row", "primary_muscle": "upper back", "secondary_muscles": ["lats", "biceps", "rear delts"]},
    {"name": "Pull-Up", "primary_muscle": "lats", "secondary_muscles": ["biceps", "upper back"]},
    {"name": "Chin-Up", "primary_muscle": "lats", "secondary_muscles": ["biceps"]},
    {"name": "Lat Pulldown", "primary_muscle": "lats", "secondary_muscles": ["biceps", "rear delts"]},
    {"name": "Dip", "primary_muscle": "triceps", "secondary_muscles": ["chest", "front delts"]},
    {"name": "Leg Press", "primary_muscle": "quadriceps", "secondary_muscles": ["glutes"]},
    {"name": "Walking Lunge", "primary_muscle": "quadriceps", "secondary_muscles": ["glutes", "hamstrings"]},
    {"name": "Hip Thrust", "primary_muscle": "glutes", "secondary_muscles": ["hamstrings"]},
    {"name": "Leg Curl", "primary_muscle": "hamstrings", "secondary_muscles": None},
    {"name": "Leg Extension", "primary_muscle": "quadriceps", "secondary_muscles": None},
    {"name": "Standing Calf Raise", "primary_muscle": "calves", "secondary_muscles": None},
    {"name": "Barbell Curl", "primary_muscle": "biceps", "secondary_muscles": ["forearms"]},
    {"name": "Triceps Pushdown", "primary_muscle": "triceps", "secondary_muscles": None},
    {"name": "Lateral Raise", "primary_muscle": "shoulders", "secondary_muscles": None},
    {"name": "Face Pull", "primary_muscle": "rear delts", "secondary_muscles": ["upper back"]},
    {"name": "Plank", "primary_muscle": "abs", "secondary_muscles": ["obliques"]},
]


async def seed_system_exercises(db: AsyncSession) -> int:
    """Insert system entries missing by name. Returns how many were added."""
    result = await db.execute(select(Exercise.name).where(Exercise.user_id.is_(None)))
    existing = set(result.scalars().all())

    missing = [Exercise(**entry) for entry in SYSTEM_EXERCISES if entry["name"] not in existing]
    if missing:
        db.add_all(missing)
        await db.commit()
    logger.info("system_exercises_seeded", added=len(missing), existing=len(existing))
    return len(missing)


async def main() -> None:
    from .database import AsyncSessionLocal, engine
    from .logging_config import configure_logging

    configure_logging()
    try:
        async with AsyncSessionLocal() as db:
            await seed_system_exercises(db)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
