import datetime as dt

from sqlalchemy import RowMapping, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Exercise, Workout, WorkoutExercise, WorkoutSet


class WorkoutRepository:
    """Owner-scoped reads. Every query is rooted at ``Workout.user_id``."""

    @staticmethod
    async def fetch_workout_rows(
        db: AsyncSession,
        user_id: str,
        *,
        day: dt.date | None = None,
        workout_id: int | None = None,
    ) -> list[RowMapping]:
        """One flat row per (workout, workout exercise, set); missing children come back as NULLs."""
        query = (
            select(
                Workout.id.label("workout_id"),
                Workout.name.label("workout_name"),
                Workout.date.label("workout_date"),
                Workout.notes.label("workout_notes"),
                WorkoutExercise.id.label("workout_exercise_id"),
                WorkoutExercise.order.label("exercise_order"),
                Exercise.id.label("exercise_id"),
                Exercise.name.label("exercise_name"),
                Exercise.primary_muscle.label("primary_muscle"),
                WorkoutSet.id.label("set_id"),
                WorkoutSet.set_number.label("set_number"),
                WorkoutSet.weight.label("weight"),
                WorkoutSet.reps.label("reps"),
                WorkoutSet.notes.label("set_notes"),
            )
            .select_from(Workout)
            .outerjoin(WorkoutExercise, WorkoutExercise.workout_id == Workout.id)
            .outerjoin(Exercise, Exercise.id == WorkoutExercise.exercise_id)
            .outerjoin(WorkoutSet, WorkoutSet.workout_exercise_id == WorkoutExercise.id)
            .where(Workout.user_id == user_id)
        )
        if day is not None:
            query = query.where(Workout.date == day)
        if workout_id is not None:
            query = query.where(Workout.id == workout_id)

        query = query.order_by(Workout.id, WorkoutExercise.order, WorkoutSet.set_number)
        result = await db.execute(query)
        return list(result.mappings().all())

    @staticmethod
    async def count_workouts(db: AsyncSession, user_id: str) -> int:
        result = await db.execute(select(func.count(Workout.id)).where(Workout.user_id == user_id))
        return int(result.scalar_one())

    @staticmethod
    async def recent_workouts(db: AsyncSession, user_id: str, limit: int) -> list[RowMapping]:
        result = await db.execute(
            select(Workout.id, Workout.name, Workout.date)
            .where(Workout.user_id == user_id)
            .order_by(Workout.date.desc(), Workout.id.desc())
            .limit(limit)
        )
        return list(result.mappings().all())

    @staticmethod
    async def count_workout_exercises_since(db: AsyncSession, user_id: str, since: dt.date) -> int:
        result = await db.execute(
            select(func.count(WorkoutExercise.id))
            .select_from(WorkoutExercise)
            .join(Workout, WorkoutExercise.workout_id == Workout.id)
            .where(Workout.user_id == user_id, Workout.date >= since)
        )
        return int(result.scalar_one())

    @staticmethod
    async def count_sets_since(db: AsyncSession, user_id: str, since: dt.date) -> int:
        result = await db.execute(
            select(func.count(WorkoutSet.id))
            .select_from(WorkoutSet)
            .join(WorkoutExercise, WorkoutSet.workout_exercise_id == WorkoutExercise.id)
            .join(Workout, WorkoutExercise.workout_id == Workout.id)
            .where(Workout.user_id == user_id, Workout.date >= since)
        )
        return int(result.scalar_one())

    @staticmethod
    async def get_owned_workout(db: AsyncSession, user_id: str, workout_id: int) -> Workout | None:
        result = await db.execute(
            select(Workout).where(Workout.id == workout_id).where(Workout.user_id == user_id)
        )
        return result.scalars().first()

    @staticmethod
    async def get_owned_workout_exercise(
        db: AsyncSession, user_id: str, workout_exercise_id: int
    ) -> WorkoutExercise | None:
        result = await db.execute(
            select(WorkoutExercise)
            .join(Workout, WorkoutExercise.workout_id == Workout.id)
            .where(WorkoutExercise.id == workout_exercise_id)
            .where(Workout.user_id == user_id)
        )
        return result.scalars().first()

    @staticmethod
    async def get_owned_set(db: AsyncSession, user_id: str, set_id: int) -> WorkoutSet | None:
        result = await db.execute(
            select(WorkoutSet)
            .join(WorkoutExercise, WorkoutSet.workout_exercise_id == WorkoutExercise.id)
            .join(Workout, WorkoutExercise.workout_id == Workout.id)
            .where(WorkoutSet.id == set_id)
            .where(Workout.user_id == user_id)
        )
        return result.scalars().first()

    @staticmethod
    async def next_exercise_order(db: AsyncSession, workout_id: int) -> int:
        result = await db.execute(
            select(func.coalesce(func.max(WorkoutExercise.order), 0)).where(WorkoutExercise.workout_id == workout_id)
        )
        return int(result.scalar_one()) + 1

    @staticmethod
    async def next_set_number(db: AsyncSession, workout_exercise_id: int) -> int:
        result = await db.execute(
            select(func.coalesce(func.max(WorkoutSet.set_number), 0)).where(
                WorkoutSet.workout_exercise_id == workout_exercise_id
            )
        )
        return int(result.scalar_one()) + 1
