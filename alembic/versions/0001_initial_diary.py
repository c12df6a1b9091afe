"""initial diary tables and system exercise catalog

Revision ID: 0001_initial_diary
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from diary_service.seed import SYSTEM_EXERCISES

# revision identifiers, used by Alembic.
revision: str = "0001_initial_diary"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    exercises = op.create_table(
        "exercises",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("primary_muscle", sa.String(length=255), nullable=True),
        sa.Column("secondary_muscles", sa.JSON, nullable=True),
        sa.Column("user_id", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_exercises_id", "exercises", ["id"])
    op.create_index("ix_exercises_user_id", "exercises", ["user_id"])

    op.create_table(
        "workouts",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_workouts_id", "workouts", ["id"])
    op.create_index("ix_workouts_user_id", "workouts", ["user_id"])
    op.create_index("ix_workouts_date", "workouts", ["date"])

    op.create_table(
        "workout_exercises",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "workout_id",
            sa.Integer,
            sa.ForeignKey("workouts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "exercise_id",
            sa.Integer,
            sa.ForeignKey("exercises.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("order", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('"order" > 0', name="ck_workout_exercises_order_positive"),
    )
    op.create_index("ix_workout_exercises_id", "workout_exercises", ["id"])
    op.create_index("ix_workout_exercises_workout_id", "workout_exercises", ["workout_id"])
    op.create_index("ix_workout_exercises_exercise_id", "workout_exercises", ["exercise_id"])

    op.create_table(
        "sets",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "workout_exercise_id",
            sa.Integer,
            sa.ForeignKey("workout_exercises.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("set_number", sa.Integer, nullable=False),
        sa.Column("weight", sa.Numeric(7, 2), nullable=True),
        sa.Column("reps", sa.Integer, nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("set_number > 0", name="ck_sets_set_number_positive"),
        sa.CheckConstraint("reps > 0", name="ck_sets_reps_positive"),
    )
    op.create_index("ix_sets_id", "sets", ["id"])
    op.create_index("ix_sets_workout_exercise_id", "sets", ["workout_exercise_id"])

    op.bulk_insert(exercises, [dict(entry, user_id=None) for entry in SYSTEM_EXERCISES])


def downgrade() -> None:
    op.drop_index("ix_sets_workout_exercise_id", table_name="sets")
    op.drop_index("ix_sets_id", table_name="sets")
    op.drop_table("sets")
    op.drop_index("ix_workout_exercises_exercise_id", table_name="workout_exercises")
    op.drop_index("ix_workout_exercises_workout_id", table_name="workout_exercises")
    op.drop_index("ix_workout_exercises_id", table_name="workout_exercises")
    op.drop_table("workout_exercises")
    op.drop_index("ix_workouts_date", table_name="workouts")
    op.drop_index("ix_workouts_user_id", table_name="workouts")
    op.drop_index("ix_workouts_id", table_name="workouts")
    op.drop_table("workouts")
    op.drop_index("ix_exercises_user_id", table_name="exercises")
    op.drop_index("ix_exercises_id", table_name="exercises")
    op.drop_table("exercises")
