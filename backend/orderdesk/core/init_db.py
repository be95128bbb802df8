# backend/orderdesk/core/init_db.py
import asyncio
import logging
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.orm import sessionmaker
from orderdesk.core.config import settings
from orderdesk.core.database import async_session, engine, Base
from orderdesk.core.security import hash_password
# Import all models to register them with Base
from orderdesk.models import User, UserRole

logger = logging.getLogger(__name__)


async def create_default_admin(session: AsyncSession) -> bool:
    """Create the bootstrap admin account if it does not exist yet.

    Returns:
        True if the account was created
    """
    result = await session.execute(
        select(User).where(User.username == settings.DEFAULT_ADMIN_USERNAME)
    )
    if result.scalar_one_or_none():
        logger.info("Default admin user already exists")
        return False

    session.add(User(
        username=settings.DEFAULT_ADMIN_USERNAME,
        password_hash=hash_password(settings.DEFAULT_ADMIN_PASSWORD),
        role=UserRole.ADMIN,
        email="admin@example.com",
    ))
    await session.commit()
    logger.info(f"Created default user: {settings.DEFAULT_ADMIN_USERNAME}")
    return True


async def init_db(db_engine: AsyncEngine = engine, session_factory: sessionmaker = async_session):
    """Create tables and the default admin user."""
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with session_factory() as session:
        await create_default_admin(session)


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    asyncio.run(init_db())
