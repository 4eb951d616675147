"""Async engine, session factory and schema bootstrap."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

import config

logger = logging.getLogger("nbm.db")


class Base(DeclarativeBase):
    """Declarative base shared by users and site settings."""


engine = create_async_engine(config.DATABASE_URL, echo=config.DATABASE_ECHO)

# Objects stay usable after commit; services return them outside the session.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def init_db() -> None:
    """Create any missing tables. Existing tables are left as they are."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.debug("Schema ready: %s", ", ".join(sorted(Base.metadata.tables)))


async def dispose_db() -> None:
    """Close pooled connections (end of a script run or test)."""
    await engine.dispose()
