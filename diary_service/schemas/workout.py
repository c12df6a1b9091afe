import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field


class SetCreate(BaseModel):
    set_number: int | None = Field(None, ge=1, description="Defaults to the 1-based position in the list")
    weight: Decimal | None = Field(None, ge=0, max_digits=7, decimal_places=2, description="Unit-less load")
    reps: int = Field(..., ge=1)
    notes: str | None = None

    class Config:
        extra = "forbid"


class SetUpdate(BaseModel):
    set_number: int | None = Field(None, ge=1)
    weight: Decimal | None = Field(None, ge=0, max_digits=7, decimal_places=2)
    reps: int | None = Field(None, ge=1)
    notes: str | None = None

    class Config:
        extra = "forbid"


class WorkoutExerciseCreate(BaseModel):
    exercise_id: int
    order: int | None = Field(None, ge=1, description="Defaults to the 1-based position in the list")
    sets: list[SetCreate] = Field(default_factory=list)

    class Config:
        extra = "forbid"


class WorkoutCreate(BaseModel):
    name: str | None = Field(None, max_length=255)
    date: dt.date
    notes: str | None = None
    exercises: list[WorkoutExerciseCreate] = Field(default_factory=list)

    class Config:
        extra = "forbid"


class WorkoutUpdate(BaseModel):
    name: str | None = Field(None, max_length=255)
    date: dt.date | None = None
    notes: str | None = None

    class Config:
        extra = "forbid"


class ExerciseBrief(BaseModel):
    id: int
    name: str
    primary_muscle: str | None = None


class SetResponse(BaseModel):
    id: int
    set_number: int
    weight: Decimal | None = None
    reps: int
    notes: str | None = None

    class Config:
        from_attributes = True


class WorkoutExerciseResponse(BaseModel):
    id: int
    order: int
    exercise: ExerciseBrief
    sets: list[SetResponse] = Field(default_factory=list)


class WorkoutWithExercises(BaseModel):
    id: int
    name: str | None = None
    date: dt.date
    notes: str | None = None
    exercises: list[WorkoutExerciseResponse] = Field(default_factory=list)


class WorkoutResponse(BaseModel):
    id: int
    name: str | None = None
    date: dt.date
    notes: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        from_attributes = True


class WorkoutExerciseCreated(BaseModel):
    id: int
    workout_id: int
    exercise_id: int
    order: int
    sets: list[SetResponse] = Field(default_factory=list)
