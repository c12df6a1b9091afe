import datetime as dt
from decimal import Decimal

from diary_service.services.dashboard_service import fold_workout_rows

DAY = dt.date(2026, 3, 14)


def row(
    workout_id=1,
    workout_exercise_id=None,
    order=None,
    exercise_id=None,
    set_id=None,
    set_number=None,
    reps=None,
    weight=None,
):
    return {
        "workout_id": workout_id,
        "workout_name": f"Workout {workout_id}",
        "workout_date": DAY,
        "workout_notes": None,
        "workout_exercise_id": workout_exercise_id,
        "exercise_order": order,
        "exercise_id": exercise_id,
        "exercise_name": None if exercise_id is None else f"Exercise {exercise_id}",
        "primary_muscle": None,
        "set_id": set_id,
        "set_number": set_number,
        "weight": weight,
        "reps": reps,
        "set_notes": None,
    }


def test_no_rows_gives_no_workouts():
    assert fold_workout_rows([]) == []


def test_workout_without_exercises_has_empty_list():
    folded = fold_workout_rows([row(workout_id=7)])

    assert len(folded) == 1
    assert folded[0].id == 7
    assert folded[0].exercises == []


def test_exercise_without_sets_has_empty_list():
    folded = fold_workout_rows([row(workout_exercise_id=10, order=1, exercise_id=3)])

    (exercise,) = folded[0].exercises
    assert exercise.id == 10
    assert exercise.exercise.id == 3
    assert exercise.sets == []


def test_missing_exercise_columns_do_not_create_an_exercise():
    folded = fold_workout_rows([row(workout_exercise_id=10, order=1, exercise_id=None)])

    assert folded[0].exercises == []


def test_rows_are_grouped_without_duplicates():
    rows = [
        row(workout_exercise_id=10, order=1, exercise_id=3, set_id=100, set_number=1, reps=5),
        row(workout_exercise_id=10, order=1, exercise_id=3, set_id=101, set_number=2, reps=5),
        row(workout_exercise_id=11, order=2, exercise_id=4, set_id=102, set_number=1, reps=8),
        row(workout_exercise_id=10, order=1, exercise_id=3, set_id=100, set_number=1, reps=5),
    ]

    (workout,) = fold_workout_rows(rows)

    assert [e.id for e in workout.exercises] == [10, 11]
    assert [s.id for s in workout.exercises[0].sets] == [100, 101]
    assert [s.id for s in workout.exercises[1].sets] == [102]


def test_children_are_sorted_with_ties_broken_by_id():
    rows = [
        row(workout_exercise_id=12, order=2, exercise_id=1),
        row(workout_exercise_id=11, order=1, exercise_id=1, set_id=203, set_number=2, reps=1),
        row(workout_exercise_id=11, order=1, exercise_id=1, set_id=202, set_number=1, reps=1),
        row(workout_exercise_id=11, order=1, exercise_id=1, set_id=201, set_number=1, reps=1),
        row(workout_exercise_id=10, order=2, exercise_id=1),
    ]

    (workout,) = fold_workout_rows(rows)

    assert [(e.order, e.id) for e in workout.exercises] == [(1, 11), (2, 10), (2, 12)]
    assert [(s.set_number, s.id) for s in workout.exercises[0].sets] == [(1, 201), (1, 202), (2, 203)]


def test_workouts_keep_first_appearance_order():
    rows = [row(workout_id=3), row(workout_id=1), row(workout_id=3, workout_exercise_id=5, order=1, exercise_id=2)]

    folded = fold_workout_rows(rows)

    assert [w.id for w in folded] == [3, 1]
    assert [e.id for e in folded[0].exercises] == [5]


def test_set_values_are_carried_through():
    rows = [
        row(workout_exercise_id=10, order=1, exercise_id=3, set_id=1, set_number=1, reps=5, weight=Decimal("102.50")),
        row(workout_exercise_id=10, order=1, exercise_id=3, set_id=2, set_number=2, reps=12, weight=None),
    ]

    sets = fold_workout_rows(rows)[0].exercises[0].sets

    assert sets[0].weight == Decimal("102.50")
    assert sets[0].reps == 5
    assert sets[1].weight is None
