from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from coaching_api.core.config import get_database_url, get_engine_options
from coaching_api.core.logging import logger
from coaching_api.models import Base

# Pool sizing and echo come from settings; sqlite gets neither
engine = create_async_engine(get_database_url(), **get_engine_options())

# Responses are built from ORM objects after commit, so nothing may expire
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides an async database session.
    Usage: db: AsyncSession = Depends(get_db)

    Services commit their own transactions; anything left open when a
    request fails is rolled back here.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create missing tables; schema changes go through alembic"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured", extra={"event": "db_init"})


async def close_db() -> None:
    await engine.dispose()
