"""Write entry points.

Every action resolves identity from the request's ``AuthContext``, validates
the raw payload, calls the mutation layer and reports the outcome as an
``ActionResult``. Actions never raise.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import AuthContext
from .exceptions import ExerciseInUseException, NotFoundException
from .metrics import ACTION_RESULTS_TOTAL
from .schemas.action import ActionResult, ActionStatus
from .schemas.exercise import ExerciseCreate, ExerciseUpdate
from .schemas.workout import SetCreate, SetUpdate, WorkoutCreate, WorkoutExerciseCreate, WorkoutUpdate
from .services.exercise_service import ExerciseService
from .services.workout_service import WorkoutService

logger = structlog.get_logger(__name__)

UNAUTHENTICATED_MESSAGE = "You must be signed in to make changes"
INVALID_MESSAGE = "Some fields are invalid"
STORE_FAILURE_MESSAGE = "Something went wrong while saving. Please try again."


def field_errors_from(exc: ValidationError) -> dict[str, list[str]]:
    """Group validation messages by dotted field path, e.g. ``exercises.0.sets.1.reps``."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        path = ".".join(str(part) for part in error.get("loc", ())) or "__root__"
        errors.setdefault(path, []).append(error.get("msg", "Invalid value"))
    return errors


async def _run(
    action: str,
    auth: AuthContext,
    db: AsyncSession,
    operation: Callable[[str], Awaitable[Any]],
) -> ActionResult:
    if not auth.is_authenticated:
        result = ActionResult.failure(ActionStatus.unauthenticated, UNAUTHENTICATED_MESSAGE)
    else:
        try:
            result = ActionResult.success(await operation(auth.user_id))
        except ValidationError as exc:
            result = ActionResult.failure(ActionStatus.invalid, INVALID_MESSAGE, field_errors_from(exc))
        except NotFoundException as exc:
            result = ActionResult.failure(ActionStatus.not_found, exc.detail)
        except ExerciseInUseException as exc:
            result = ActionResult.failure(ActionStatus.conflict, exc.detail)
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("action_store_failure", action=action, user_id=auth.user_id)
            result = ActionResult.failure(ActionStatus.error, STORE_FAILURE_MESSAGE)
        except Exception:
            await db.rollback()
            logger.exception("action_unexpected_failure", action=action, user_id=auth.user_id)
            result = ActionResult.failure(ActionStatus.error, STORE_FAILURE_MESSAGE)

    ACTION_RESULTS_TOTAL.labels(action=action, status=result.status.value).inc()
    if not result.ok:
        logger.info("action_rejected", action=action, user_id=auth.user_id, status=result.status.value)
    return result


async def create_workout(auth: AuthContext, db: AsyncSession, payload: Any) -> ActionResult:
    async def operation(user_id: str):
        return await WorkoutService(db, user_id).create_workout(WorkoutCreate.model_validate(payload))

    return await _run("create_workout", auth, db, operation)


async def update_workout(auth: AuthContext, db: AsyncSession, workout_id: int, payload: Any) -> ActionResult:
    async def operation(user_id: str):
        return await WorkoutService(db, user_id).update_workout(workout_id, WorkoutUpdate.model_validate(payload))

    return await _run("update_workout", auth, db, operation)


async def delete_workout(auth: AuthContext, db: AsyncSession, workout_id: int) -> ActionResult:
    async def operation(user_id: str):
        await WorkoutService(db, user_id).delete_workout(workout_id)
        return {"id": workout_id}

    return await _run("delete_workout", auth, db, operation)


async def add_exercise_to_workout(auth: AuthContext, db: AsyncSession, workout_id: int, payload: Any) -> ActionResult:
    async def operation(user_id: str):
        return await WorkoutService(db, user_id).add_exercise(workout_id, WorkoutExerciseCreate.model_validate(payload))

    return await _run("add_exercise_to_workout", auth, db, operation)


async def remove_exercise_from_workout(auth: AuthContext, db: AsyncSession, workout_exercise_id: int) -> ActionResult:
    async def operation(user_id: str):
        await WorkoutService(db, user_id).remove_exercise(workout_exercise_id)
        return {"id": workout_exercise_id}

    return await _run("remove_exercise_from_workout", auth, db, operation)


async def add_set(auth: AuthContext, db: AsyncSession, workout_exercise_id: int, payload: Any) -> ActionResult:
    async def operation(user_id: str):
        return await WorkoutService(db, user_id).add_set(workout_exercise_id, SetCreate.model_validate(payload))

    return await _run("add_set", auth, db, operation)


async def update_set(auth: AuthContext, db: AsyncSession, set_id: int, payload: Any) -> ActionResult:
    async def operation(user_id: str):
        return await WorkoutService(db, user_id).update_set(set_id, SetUpdate.model_validate(payload))

    return await _run("update_set", auth, db, operation)


async def delete_set(auth: AuthContext, db: AsyncSession, set_id: int) -> ActionResult:
    async def operation(user_id: str):
        await WorkoutService(db, user_id).delete_set(set_id)
        return {"id": set_id}

    return await _run("delete_set", auth, db, operation)


async def create_exercise(auth: AuthContext, db: AsyncSession, payload: Any) -> ActionResult:
    async def operation(user_id: str):
        return await ExerciseService(db, user_id).create_exercise(ExerciseCreate.model_validate(payload))

    return await _run("create_exercise", auth, db, operation)


async def update_exercise(auth: AuthContext, db: AsyncSession, exercise_id: int, payload: Any) -> ActionResult:
    async def operation(user_id: str):
        return await ExerciseService(db, user_id).update_exercise(exercise_id, ExerciseUpdate.model_validate(payload))

    return await _run("update_exercise", auth, db, operation)


async def delete_exercise(auth: AuthContext, db: AsyncSession, exercise_id: int) -> ActionResult:
    async def operation(user_id: str):
        await ExerciseService(db, user_id).delete_exercise(exercise_id)
        return {"id": exercise_id}

    return await _run("delete_exercise", auth, db, operation)
