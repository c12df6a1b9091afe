from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect, text

from diary_service.seed import SYSTEM_EXERCISES

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _alembic_config() -> Config:
    cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return cfg


def test_upgrade_creates_schema_and_seeds_catalog(tmp_path, monkeypatch):
    db_path = tmp_path / "migrated.db"
    monkeypatch.setenv("DIARY_DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    cfg = _alembic_config()

    command.upgrade(cfg, "head")

    engine = create_engine(f"sqlite:///{db_path}")
    try:
        tables = set(inspect(engine).get_table_names())
        assert {"exercises", "workouts", "workout_exercises", "sets"} <= tables
        with engine.connect() as conn:
            seeded = conn.execute(text("SELECT count(*) FROM exercises WHERE user_id IS NULL")).scalar_one()
        assert seeded == len(SYSTEM_EXERCISES)
    finally:
        engine.dispose()

    command.downgrade(cfg, "base")

    engine = create_engine(f"sqlite:///{db_path}")
    try:
        assert "workouts" not in inspect(engine).get_table_names()
    finally:
        engine.dispose()
