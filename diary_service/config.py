from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DIARY_DATABASE_URL: str = "sqlite+aiosqlite:///./diary.db"
    DIARY_DATABASE_ECHO: bool = False

    DIARY_REDIS_ENABLED: bool = True
    DIARY_REDIS_HOST: str = "redis"
    DIARY_REDIS_PORT: int = 6379
    DIARY_REDIS_DB: int = 0
    DIARY_REDIS_PASSWORD: str | None = None

    DASHBOARD_CACHE_TTL_SECONDS: int = 5 * 60

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
