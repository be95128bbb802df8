"""Shared test fixtures.

Settings are read at import time, so the environment is prepared before
anything from orderdesk is imported.
"""

import os
import tempfile

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault(
    "DATABASE_URL", f"sqlite+aiosqlite:///{os.path.join(tempfile.gettempdir(), 'orderdesk-test.db')}"
)

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from orderdesk.core.database import Base
from orderdesk.models.product import Product
from orderdesk.services.events import ChangeEventEmitter

from factories import product_document


# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session(test_engine):
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with async_session() as session:
        yield session


@pytest.fixture
def emitter():
    """A private emitter that records everything published on it."""
    emitter = ChangeEventEmitter()
    emitter.events = []
    emitter.subscribe(emitter.events.append)
    return emitter


@pytest.fixture
async def make_product(test_session):
    """Insert a product directly and return it."""

    async def make(part_no: str = "CS-001-STL", product_type: str = "CS", status: str = "ACTIVE", **overrides):
        product = Product(**product_document(part_no, product_type, **overrides), status=status)
        test_session.add(product)
        await test_session.commit()
        return product

    return make
