from fastapi import HTTPException, status


class NotFoundException(HTTPException):
    """Raised for rows that are absent *or* owned by someone else; callers cannot tell which."""

    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class WorkoutNotFoundException(NotFoundException):
    def __init__(self, workout_id: int):
        super().__init__(detail=f"Workout with id={workout_id} not found")


class WorkoutExerciseNotFoundException(NotFoundException):
    def __init__(self, workout_exercise_id: int):
        super().__init__(detail=f"Workout exercise with id={workout_exercise_id} not found")


class SetNotFoundException(NotFoundException):
    def __init__(self, set_id: int):
        super().__init__(detail=f"Set with id={set_id} not found")


class ExerciseNotFoundException(NotFoundException):
    def __init__(self, exercise_id: int):
        super().__init__(detail=f"Exercise with id={exercise_id} not found")


class ExerciseInUseException(HTTPException):
    def __init__(self, exercise_id: int):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Exercise with id={exercise_id} is used in a workout and cannot be deleted",
        )
