import datetime as dt

from fastapi import APIRouter, Depends, Query

from ..dependencies import get_dashboard_service
from ..schemas.dashboard import WorkoutSummary
from ..schemas.workout import WorkoutWithExercises
from ..services.dashboard_service import DashboardService

router = APIRouter(tags=["dashboard"])


@router.get("/workouts", response_model=list[WorkoutWithExercises])
async def get_workouts_by_date(
    date: dt.date = Query(..., description="Calendar date, yyyy-mm-dd"),
    service: DashboardService = Depends(get_dashboard_service),
):
    return await service.workouts_by_date(date)


@router.get("/summary", response_model=WorkoutSummary | None)
async def get_workout_summary(service: DashboardService = Depends(get_dashboard_service)):
    return await service.summary()
