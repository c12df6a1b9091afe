from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import actions
from ..auth import AuthContext, get_auth_context
from ..database import get_db
from ..dependencies import action_response, get_dashboard_service
from ..exceptions import WorkoutNotFoundException
from ..schemas.workout import WorkoutWithExercises
from ..services.dashboard_service import DashboardService

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["workouts"])


@router.get("/workouts/{workout_id}", response_model=WorkoutWithExercises)
async def get_workout(workout_id: int, service: DashboardService = Depends(get_dashboard_service)):
    workout = await service.workout(workout_id)
    if workout is None:
        raise WorkoutNotFoundException(workout_id)
    return workout


@router.post("/workouts/")
async def create_workout(
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    logger.info("workout_create_requested", user_id=auth.user_id)
    result = await actions.create_workout(auth, db, payload)
    return action_response(result, status.HTTP_201_CREATED)


@router.put("/workouts/{workout_id}")
async def update_workout(
    workout_id: int,
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    return action_response(await actions.update_workout(auth, db, workout_id, payload))


@router.delete("/workouts/{workout_id}")
async def delete_workout(
    workout_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    return action_response(await actions.delete_workout(auth, db, workout_id))


@router.post("/workouts/{workout_id}/exercises")
async def add_exercise_to_workout(
    workout_id: int,
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    result = await actions.add_exercise_to_workout(auth, db, workout_id, payload)
    return action_response(result, status.HTTP_201_CREATED)


@router.delete("/workout-exercises/{workout_exercise_id}")
async def remove_exercise_from_workout(
    workout_exercise_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    return action_response(await actions.remove_exercise_from_workout(auth, db, workout_exercise_id))


@router.post("/workout-exercises/{workout_exercise_id}/sets")
async def add_set(
    workout_exercise_id: int,
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    result = await actions.add_set(auth, db, workout_exercise_id, payload)
    return action_response(result, status.HTTP_201_CREATED)


@router.put("/sets/{set_id}")
async def update_set(
    set_id: int,
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    return action_response(await actions.update_set(auth, db, set_id, payload))


@router.delete("/sets/{set_id}")
async def delete_set(
    set_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    return action_response(await actions.delete_set(auth, db, set_id))
