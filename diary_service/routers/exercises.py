from typing import Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import actions
from ..auth import AuthContext, get_auth_context
from ..database import get_db
from ..dependencies import action_response, get_dashboard_service
from ..schemas.exercise import ExerciseResponse
from ..services.dashboard_service import DashboardService

router = APIRouter(tags=["exercises"])


@router.get("/", response_model=list[ExerciseResponse])
async def list_exercises(service: DashboardService = Depends(get_dashboard_service)):
    return await service.exercises()


@router.post("/")
async def create_exercise(
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    result = await actions.create_exercise(auth, db, payload)
    return action_response(result, status.HTTP_201_CREATED)


@router.put("/{exercise_id}")
async def update_exercise(
    exercise_id: int,
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    return action_response(await actions.update_exercise(auth, db, exercise_id, payload))


@router.delete("/{exercise_id}")
async def delete_exercise(
    exercise_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    return action_response(await actions.delete_exercise(auth, db, exercise_id))
