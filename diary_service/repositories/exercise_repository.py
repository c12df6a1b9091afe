from collections.abc import Iterable

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Exercise, WorkoutExercise


def visible_to(user_id: str):
    """System catalog entries plus the user's own."""
    return or_(Exercise.user_id.is_(None), Exercise.user_id == user_id)


class ExerciseRepository:
    @staticmethod
    async def list_visible(db: AsyncSession, user_id: str) -> list[Exercise]:
        result = await db.execute(select(Exercise).where(visible_to(user_id)).order_by(Exercise.name, Exercise.id))
        return list(result.scalars().all())

    @staticmethod
    async def visible_ids(db: AsyncSession, user_id: str, ids: Iterable[int]) -> set[int]:
        wanted = set(ids)
        if not wanted:
            return set()
        result = await db.execute(select(Exercise.id).where(Exercise.id.in_(wanted)).where(visible_to(user_id)))
        return set(result.scalars().all())

    @staticmethod
    async def get_owned(db: AsyncSession, user_id: str, exercise_id: int) -> Exercise | None:
        result = await db.execute(
            select(Exercise).where(Exercise.id == exercise_id).where(Exercise.user_id == user_id)
        )
        return result.scalars().first()

    @staticmethod
    async def count_usages(db: AsyncSession, exercise_id: int) -> int:
        result = await db.execute(
            select(func.count(WorkoutExercise.id)).where(WorkoutExercise.exercise_id == exercise_id)
        )
        return int(result.scalar_one())
