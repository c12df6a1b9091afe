import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import ExerciseInUseException, ExerciseNotFoundException
from ..metrics import EXERCISES_CREATED_TOTAL
from ..models import Exercise
from ..repositories.exercise_repository import ExerciseRepository
from ..schemas.exercise import ExerciseCreate, ExerciseResponse, ExerciseUpdate
from .transaction import committing

logger = structlog.get_logger(__name__)


def to_exercise_response(exercise: Exercise) -> ExerciseResponse:
    return ExerciseResponse(
        id=exercise.id,
        name=exercise.name,
        primary_muscle=exercise.primary_muscle,
        secondary_muscles=exercise.secondary_muscles or [],
        is_custom=exercise.user_id is not None,
    )


class ExerciseService:
    """User-created catalog entries. System entries are never writable here."""

    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id

    async def _require_owned(self, exercise_id: int) -> Exercise:
        exercise = await ExerciseRepository.get_owned(self.db, self.user_id, exercise_id)
        if exercise is None:
            raise ExerciseNotFoundException(exercise_id)
        return exercise

    async def create_exercise(self, payload: ExerciseCreate) -> ExerciseResponse:
        exercise = Exercise(
            name=payload.name,
            primary_muscle=payload.primary_muscle,
            secondary_muscles=payload.secondary_muscles,
            user_id=self.user_id,
        )
        async with committing(self.db, self.user_id):
            self.db.add(exercise)
            await self.db.flush()

        EXERCISES_CREATED_TOTAL.inc()
        logger.info("exercise_create_success", user_id=self.user_id, exercise_id=exercise.id)
        return to_exercise_response(exercise)

    async def update_exercise(self, exercise_id: int, payload: ExerciseUpdate) -> ExerciseResponse:
        async with committing(self.db, self.user_id):
            exercise = await self._require_owned(exercise_id)
            changes = payload.model_dump(exclude_unset=True)
            # name is required on the row
            if "name" in changes and changes["name"] is None:
                del changes["name"]
            for field, value in changes.items():
                setattr(exercise, field, value)

        logger.info("exercise_update_success", user_id=self.user_id, exercise_id=exercise_id, fields=sorted(changes))
        return to_exercise_response(exercise)

    async def delete_exercise(self, exercise_id: int) -> None:
        try:
            async with committing(self.db, self.user_id):
                exercise = await self._require_owned(exercise_id)
                if await ExerciseRepository.count_usages(self.db, exercise_id):
                    raise ExerciseInUseException(exercise_id)
                await self.db.delete(exercise)
        except IntegrityError:
            # referenced between the usage check and the delete
            raise ExerciseInUseException(exercise_id) from None

        logger.info("exercise_delete_success", user_id=self.user_id, exercise_id=exercise_id)
