from __future__ import annotations

from collections.abc import Iterable

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import (
    ExerciseNotFoundException,
    SetNotFoundException,
    WorkoutExerciseNotFoundException,
    WorkoutNotFoundException,
)
from ..metrics import SETS_LOGGED_TOTAL, WORKOUTS_CREATED_TOTAL
from ..models import Workout, WorkoutExercise, WorkoutSet, _utcnow
from ..repositories.exercise_repository import ExerciseRepository
from ..repositories.workout_repository import WorkoutRepository
from ..schemas.workout import (
    SetCreate,
    SetResponse,
    SetUpdate,
    WorkoutCreate,
    WorkoutExerciseCreate,
    WorkoutExerciseCreated,
    WorkoutResponse,
    WorkoutUpdate,
    WorkoutWithExercises,
)
from .dashboard_service import get_workout
from .transaction import committing

logger = structlog.get_logger(__name__)

# Columns that may not be cleared through a partial update.
_REQUIRED_WORKOUT_FIELDS = ("date",)
_REQUIRED_SET_FIELDS = ("set_number", "reps")


def _drop_nulls(changes: dict, required: Iterable[str]) -> dict:
    return {k: v for k, v in changes.items() if not (k in required and v is None)}


class WorkoutService:
    """Writes against one user's workouts.

    ``user_id`` must already be verified. Every target is looked up with an
    (id, owner) predicate, so rows that are missing and rows that belong to
    someone else raise the same not-found error.
    """

    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id

    async def _require_workout(self, workout_id: int) -> Workout:
        workout = await WorkoutRepository.get_owned_workout(self.db, self.user_id, workout_id)
        if workout is None:
            raise WorkoutNotFoundException(workout_id)
        return workout

    async def _require_workout_exercise(self, workout_exercise_id: int) -> WorkoutExercise:
        item = await WorkoutRepository.get_owned_workout_exercise(self.db, self.user_id, workout_exercise_id)
        if item is None:
            raise WorkoutExerciseNotFoundException(workout_exercise_id)
        return item

    async def _require_set(self, set_id: int) -> WorkoutSet:
        item = await WorkoutRepository.get_owned_set(self.db, self.user_id, set_id)
        if item is None:
            raise SetNotFoundException(set_id)
        return item

    async def _require_visible_exercises(self, exercise_ids: Iterable[int]) -> None:
        wanted = list(exercise_ids)
        visible = await ExerciseRepository.visible_ids(self.db, self.user_id, wanted)
        for exercise_id in wanted:
            if exercise_id not in visible:
                raise ExerciseNotFoundException(exercise_id)

    def _stage_sets(self, workout_exercise_id: int, sets: list[SetCreate], first_number: int = 1) -> list[WorkoutSet]:
        staged = []
        for position, payload in enumerate(sets, start=first_number):
            item = WorkoutSet(
                workout_exercise_id=workout_exercise_id,
                set_number=payload.set_number if payload.set_number is not None else position,
                weight=payload.weight,
                reps=payload.reps,
                notes=payload.notes,
            )
            self.db.add(item)
            staged.append(item)
        return staged

    async def _stage_exercise(
        self, workout_id: int, payload: WorkoutExerciseCreate, order: int
    ) -> tuple[WorkoutExercise, list[WorkoutSet]]:
        item = WorkoutExercise(workout_id=workout_id, exercise_id=payload.exercise_id, order=order)
        self.db.add(item)
        await self.db.flush()
        sets = self._stage_sets(item.id, payload.sets)
        await self.db.flush()
        return item, sets

    async def create_workout(self, payload: WorkoutCreate) -> WorkoutWithExercises:
        """Insert a workout with its exercises and sets as one unit.

        ``order`` and ``set_number`` default to the 1-based position in the
        submitted lists. The returned tree is read back before the commit, so
        nothing is kept if any insert or that read fails.
        """
        set_count = 0
        async with committing(self.db, self.user_id):
            await self._require_visible_exercises(ex.exercise_id for ex in payload.exercises)

            workout = Workout(user_id=self.user_id, name=payload.name, date=payload.date, notes=payload.notes)
            self.db.add(workout)
            await self.db.flush()

            for position, ex_payload in enumerate(payload.exercises, start=1):
                order = ex_payload.order if ex_payload.order is not None else position
                _, sets = await self._stage_exercise(workout.id, ex_payload, order)
                set_count += len(sets)

            created = await get_workout(self.db, self.user_id, workout.id)

        WORKOUTS_CREATED_TOTAL.inc()
        if set_count:
            SETS_LOGGED_TOTAL.labels(source="workout").inc(set_count)
        logger.info(
            "workout_create_success",
            user_id=self.user_id,
            workout_id=workout.id,
            exercises=len(payload.exercises),
            sets=set_count,
        )
        return created

    async def update_workout(self, workout_id: int, payload: WorkoutUpdate) -> WorkoutResponse:
        changes = _drop_nulls(payload.model_dump(exclude_unset=True), _REQUIRED_WORKOUT_FIELDS)
        async with committing(self.db, self.user_id):
            workout = await self._require_workout(workout_id)
            for field, value in changes.items():
                setattr(workout, field, value)
            workout.updated_at = _utcnow()
            await self.db.flush()

        logger.info("workout_update_success", user_id=self.user_id, workout_id=workout_id, fields=sorted(changes))
        return WorkoutResponse.model_validate(workout)

    async def delete_workout(self, workout_id: int) -> None:
        async with committing(self.db, self.user_id):
            workout = await self._require_workout(workout_id)
            await self.db.delete(workout)

        logger.info("workout_delete_success", user_id=self.user_id, workout_id=workout_id)

    async def add_exercise(self, workout_id: int, payload: WorkoutExerciseCreate) -> WorkoutExerciseCreated:
        async with committing(self.db, self.user_id):
            await self._require_workout(workout_id)
            await self._require_visible_exercises([payload.exercise_id])
            order = payload.order
            if order is None:
                order = await WorkoutRepository.next_exercise_order(self.db, workout_id)
            item, sets = await self._stage_exercise(workout_id, payload, order)

        if sets:
            SETS_LOGGED_TOTAL.labels(source="exercise").inc(len(sets))
        logger.info(
            "workout_exercise_add_success",
            user_id=self.user_id,
            workout_id=workout_id,
            workout_exercise_id=item.id,
            order=order,
        )
        return WorkoutExerciseCreated(
            id=item.id,
            workout_id=workout_id,
            exercise_id=item.exercise_id,
            order=item.order,
            sets=[SetResponse.model_validate(s) for s in sorted(sets, key=lambda s: (s.set_number, s.id))],
        )

    async def remove_exercise(self, workout_exercise_id: int) -> None:
        async with committing(self.db, self.user_id):
            item = await self._require_workout_exercise(workout_exercise_id)
            await self.db.delete(item)

        logger.info("workout_exercise_remove_success", user_id=self.user_id, workout_exercise_id=workout_exercise_id)

    async def add_set(self, workout_exercise_id: int, payload: SetCreate) -> SetResponse:
        async with committing(self.db, self.user_id):
            await self._require_workout_exercise(workout_exercise_id)
            first_number = await WorkoutRepository.next_set_number(self.db, workout_exercise_id)
            (item,) = self._stage_sets(workout_exercise_id, [payload], first_number=first_number)
            await self.db.flush()

        SETS_LOGGED_TOTAL.labels(source="single").inc()
        logger.info(
            "set_add_success",
            user_id=self.user_id,
            workout_exercise_id=workout_exercise_id,
            set_id=item.id,
            set_number=item.set_number,
        )
        return SetResponse.model_validate(item)

    async def update_set(self, set_id: int, payload: SetUpdate) -> SetResponse:
        changes = _drop_nulls(payload.model_dump(exclude_unset=True), _REQUIRED_SET_FIELDS)
        async with committing(self.db, self.user_id):
            item = await self._require_set(set_id)
            for field, value in changes.items():
                setattr(item, field, value)
            await self.db.flush()

        logger.info("set_update_success", user_id=self.user_id, set_id=set_id, fields=sorted(changes))
        return SetResponse.model_validate(item)

    async def delete_set(self, set_id: int) -> None:
        async with committing(self.db, self.user_id):
            item = await self._require_set(set_id)
            await self.db.delete(item)

        logger.info("set_delete_success", user_id=self.user_id, set_id=set_id)
