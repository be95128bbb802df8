# backend/orderdesk/core/database.py
"""Database engine and session management.

Supports PostgreSQL (asyncpg) and SQLite (aiosqlite), picked from the
scheme of the configured database URL.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import NullPool
from orderdesk.core.config import settings
import logging

logger = logging.getLogger(__name__)


def normalize_database_url(db_url: str) -> str:
    """Rewrite a plain database URL to use the matching async driver."""
    if db_url.startswith("postgresql://"):
        return db_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if db_url.startswith("sqlite://"):
        return db_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return db_url


def create_engine_for_url(db_url: str) -> AsyncEngine:
    """Create an async engine for a PostgreSQL or SQLite URL."""
    db_url = normalize_database_url(db_url)

    if db_url.startswith("postgresql+asyncpg://"):
        logger.info(f"Using PostgreSQL database: {db_url.split('@')[-1]}")
        return create_async_engine(
            db_url,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            echo=False,
        )

    elif db_url.startswith("sqlite+aiosqlite://"):
        # SQLite is for development and tests only
        logger.info(f"Using SQLite database: {db_url}")
        return create_async_engine(
            db_url,
            connect_args={"check_same_thread": False},
            poolclass=NullPool,
        )

    else:
        raise ValueError(f"Unsupported database URL scheme: {db_url}")


engine = create_engine_for_url(settings.effective_database_url)
async_session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncSession:
    async with async_session() as session:
        yield session
