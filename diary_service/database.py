from urllib.parse import urlparse

import structlog
from backend_common.database import create_async_engine_and_session, ensure_asyncpg_url
from backend_common.dependencies import make_get_db_async
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

from .config import get_settings

logger = structlog.get_logger(__name__)

settings = get_settings()
DATABASE_URL = ensure_asyncpg_url(settings.DIARY_DATABASE_URL)

logger.info("diary_database_configured", scheme=urlparse(DATABASE_URL).scheme)

# Summary sub-queries run on their own sessions, so objects must stay usable after commit.
engine, AsyncSessionLocal = create_async_engine_and_session(
    DATABASE_URL,
    echo=settings.DIARY_DATABASE_ECHO,
    autoflush=False,
    expire_on_commit=False,
)
Base = declarative_base()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return AsyncSessionLocal


get_db = make_get_db_async(get_session_factory)
