from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from ..redis_client import invalidate_dashboard_cache


@asynccontextmanager
async def committing(db: AsyncSession, user_id: str) -> AsyncIterator[AsyncSession]:
    """Commit everything written inside the block, or roll all of it back.

    The user's cached dashboard views are dropped only after a successful commit.
    """
    try:
        yield db
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await invalidate_dashboard_cache(user_id)
