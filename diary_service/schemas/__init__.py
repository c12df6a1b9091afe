# This file makes the schemas directory a Python package

from .action import ActionResult, ActionStatus
from .dashboard import RecentWorkout, WorkoutSummary
from .exercise import ExerciseCreate, ExerciseResponse, ExerciseUpdate
from .workout import (
    ExerciseBrief,
    SetCreate,
    SetResponse,
    SetUpdate,
    WorkoutCreate,
    WorkoutExerciseCreate,
    WorkoutExerciseCreated,
    WorkoutExerciseResponse,
    WorkoutResponse,
    WorkoutUpdate,
    WorkoutWithExercises,
)
