import datetime as dt
from decimal import Decimal

import pytest
from conftest import OTHER_USER_ID, USER_ID

from diary_service.services.dashboard_service import get_workout, get_workouts_by_date

DAY = dt.date(2026, 5, 2)


@pytest.mark.asyncio
async def test_only_the_requesting_users_workouts_on_that_date(db, make_workout, exercise_ids):
    squat = exercise_ids["Back Squat"]
    mine = await make_workout(USER_ID, DAY, [{"exercise_id": squat, "sets": [{"reps": 5}]}], name="Legs")
    await make_workout(OTHER_USER_ID, DAY, [{"exercise_id": squat, "sets": [{"reps": 5}]}])
    await make_workout(USER_ID, DAY + dt.timedelta(days=1))

    workouts = await get_workouts_by_date(db, USER_ID, DAY)

    assert [w.id for w in workouts] == [mine.id]
    assert workouts[0].name == "Legs"
    assert workouts[0].date == DAY


@pytest.mark.asyncio
async def test_accepts_iso_string(db, make_workout):
    created = await make_workout(USER_ID, DAY)

    by_date = await get_workouts_by_date(db, USER_ID, DAY)
    by_string = await get_workouts_by_date(db, USER_ID, "2026-05-02")

    assert [w.id for w in by_string] == [w.id for w in by_date] == [created.id]


@pytest.mark.asyncio
async def test_malformed_date_string_raises(db):
    with pytest.raises(ValueError):
        await get_workouts_by_date(db, USER_ID, "02/05/2026")


@pytest.mark.asyncio
async def test_no_workouts_gives_empty_list(db):
    assert await get_workouts_by_date(db, USER_ID, DAY) == []


@pytest.mark.asyncio
async def test_several_workouts_on_one_day_are_returned_in_creation_order(db, make_workout):
    first = await make_workout(USER_ID, DAY, name="Morning")
    second = await make_workout(USER_ID, DAY, name="Evening")

    workouts = await get_workouts_by_date(db, USER_ID, DAY)

    assert [w.id for w in workouts] == [first.id, second.id]
    assert all(w.exercises == [] for w in workouts)


@pytest.mark.asyncio
async def test_nested_tree_from_store(db, make_workout, exercise_ids):
    bench = exercise_ids["Bench Press"]
    row = exercise_ids["Barbell Row"]
    await make_workout(
        USER_ID,
        DAY,
        [
            {"exercise_id": row, "order": 2, "sets": []},
            {
                "exercise_id": bench,
                "order": 1,
                "sets": [
                    {"set_number": 2, "reps": 8, "weight": "80"},
                    {"set_number": 1, "reps": 5, "weight": "102.50"},
                ],
            },
        ],
    )

    (workout,) = await get_workouts_by_date(db, USER_ID, DAY)

    assert [e.exercise.name for e in workout.exercises] == ["Bench Press", "Barbell Row"]
    bench_sets = workout.exercises[0].sets
    assert [s.set_number for s in bench_sets] == [1, 2]
    assert bench_sets[0].weight == Decimal("102.50")
    assert workout.exercises[1].sets == []


@pytest.mark.asyncio
async def test_equal_order_values_fall_back_to_insertion_order(db, make_workout, exercise_ids):
    squat = exercise_ids["Back Squat"]
    deadlift = exercise_ids["Deadlift"]
    await make_workout(
        USER_ID,
        DAY,
        [
            {"exercise_id": deadlift, "order": 1, "sets": [{"set_number": 1, "reps": 3}, {"set_number": 1, "reps": 2}]},
            {"exercise_id": squat, "order": 1},
        ],
    )

    (workout,) = await get_workouts_by_date(db, USER_ID, DAY)

    assert [e.exercise.name for e in workout.exercises] == ["Deadlift", "Back Squat"]
    assert [s.reps for s in workout.exercises[0].sets] == [3, 2]


@pytest.mark.asyncio
async def test_get_workout_hides_other_users_rows(db, make_workout):
    created = await make_workout(OTHER_USER_ID, DAY)

    assert await get_workout(db, USER_ID, created.id) is None
    assert (await get_workout(db, OTHER_USER_ID, created.id)).id == created.id
