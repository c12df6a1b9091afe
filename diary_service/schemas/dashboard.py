import datetime as dt

from pydantic import BaseModel, Field


class RecentWorkout(BaseModel):
    id: int
    name: str | None = None
    date: dt.date

    class Config:
        from_attributes = True


class WorkoutSummary(BaseModel):
    total_workouts: int = 0
    total_exercises: int = Field(0, description="Workout-exercises in the trailing 30-day window")
    total_sets: int = Field(0, description="Sets in the trailing 30-day window")
    recent_workouts: list[RecentWorkout] = Field(default_factory=list)
    last_workout_date: dt.date | None = None
