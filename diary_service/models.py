from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class Exercise(Base):
    """Catalog entry. ``user_id`` is None for the shared system catalog."""

    __tablename__ = "exercises"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    primary_muscle = Column(String(255), nullable=True)
    secondary_muscles = Column(JSON, nullable=True)
    user_id = Column(String(255), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=_utcnow, server_default=func.now())

    def __repr__(self):
        return f"<Exercise(id={self.id}, name='{self.name}', user_id={self.user_id})>"


class Workout(Base):
    __tablename__ = "workouts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=True)
    date = Column(Date, nullable=False, index=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=_utcnow, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow, server_default=func.now())

    exercises = relationship(
        "WorkoutExercise",
        back_populates="workout",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="[WorkoutExercise.order, WorkoutExercise.id]",
    )

    def __repr__(self):
        return "<Workout(id=%s, user_id='%s', date=%s)>" % (self.id, self.user_id, self.date)


class WorkoutExercise(Base):
    __tablename__ = "workout_exercises"
    __table_args__ = (CheckConstraint('"order" > 0', name="ck_workout_exercises_order_positive"),)

    id = Column(Integer, primary_key=True, index=True)
    workout_id = Column(Integer, ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_id = Column(Integer, ForeignKey("exercises.id", ondelete="RESTRICT"), nullable=False, index=True)
    order = Column("order", Integer, nullable=False)
    created_at = Column(DateTime, nullable=False, default=_utcnow, server_default=func.now())

    workout = relationship("Workout", back_populates="exercises")
    exercise = relationship("Exercise")
    sets = relationship(
        "WorkoutSet",
        back_populates="workout_exercise",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="[WorkoutSet.set_number, WorkoutSet.id]",
    )


class WorkoutSet(Base):
    __tablename__ = "sets"
    __table_args__ = (
        CheckConstraint("set_number > 0", name="ck_sets_set_number_positive"),
        CheckConstraint("reps > 0", name="ck_sets_reps_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    workout_exercise_id = Column(
        Integer, ForeignKey("workout_exercises.id", ondelete="CASCADE"), nullable=False, index=True
    )
    set_number = Column(Integer, nullable=False)
    weight = Column(Numeric(7, 2), nullable=True)
    reps = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=_utcnow, server_default=func.now())

    workout_exercise = relationship("WorkoutExercise", back_populates="sets")
