"""Async database engine and session factory.

Provides a single engine per process with lazy initialization.
All consumers go through get_session() for connection management.
"""

import logging

from sqlalchemy import inspect, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from agriadvisor.config import settings
from agriadvisor.storage.models import Base

logger = logging.getLogger(__name__)

_engine = None
_session_factory = None


def _get_engine():
    global _engine
    if _engine is None:
        _engine = create_async_engine(settings.database_url, echo=False, pool_pre_ping=True)
    return _engine


def _missing_language_column(sync_conn) -> bool:
    columns = inspect(sync_conn).get_columns("user_inputs")
    return "language" not in {c["name"] for c in columns}


async def init_db() -> None:
    """Create tables if they don't exist and upgrade older user_inputs tables."""
    engine = _get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

        # Databases created before per-profile language was tracked
        if await conn.run_sync(_missing_language_column):
            await conn.execute(text("ALTER TABLE user_inputs ADD COLUMN language TEXT DEFAULT 'en'"))
            logger.info("Added language column to user_inputs")

    logger.info("Database initialized")


async def get_session() -> AsyncSession:
    """Get an async database session."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(_get_engine(), expire_on_commit=False)
    return _session_factory()
