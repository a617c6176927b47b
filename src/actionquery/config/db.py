"""Engine and sessions for the action store."""

from collections.abc import AsyncGenerator
from typing import Any, Final

from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession

from .config import settings

__all__ = ["engine", "get_session"]


def _engine_options() -> dict[str, Any]:
    # SQLite uses a file lock instead of a server side pool.
    if settings.is_sqlite:
        return {
            "connect_args": {
                "check_same_thread": False,
                "timeout": settings.db_timeout,
            }
        }
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": settings.db_pool_recycle,
        "pool_pre_ping": settings.db_pool_pre_ping,
    }


engine: Final = create_async_engine(
    settings.db_url, echo=settings.db_logging, **_engine_options()
)


async def get_session() -> AsyncGenerator[AsyncSession]:
    """Yield a session, committed on success and rolled back on error."""
    async with AsyncSession(engine, expire_on_commit=False) as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
