"""Fixtures for API tests."""

import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from orderdesk.api import dashboard
from orderdesk.api.deps import get_current_user
from orderdesk.core.database import Base, get_db
from orderdesk.core.security import hash_password
from orderdesk.main import app
from orderdesk.models.user import User
from orderdesk.services.events import change_emitter
from orderdesk.services.state_store import LiveStateStore


@pytest.fixture
def session_factory(tmp_path):
    """File-backed database; each request opens its own connection."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        connect_args={"check_same_thread": False},
        poolclass=NullPool,
    )

    async def create_tables():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_tables())
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    asyncio.run(engine.dispose())


@pytest.fixture
def add_user(session_factory):
    """Insert a user with a real password hash."""

    def add(username: str, password: str, role: str = "user", is_active: bool = True) -> int:
        async def insert():
            async with session_factory() as session:
                user = User(
                    username=username,
                    password_hash=hash_password(password),
                    role=role,
                    is_active=is_active,
                )
                session.add(user)
                await session.commit()
                return user.id

        return asyncio.run(insert())

    return add


@pytest.fixture
def current_user():
    return User(id=99, username="admin", password_hash="hash", role="admin", is_active=True)


@pytest.fixture
def state_store():
    """Live state wired to the process-wide emitter for the duration of a test."""
    store = LiveStateStore()
    dashboard.init_dashboard_api(store)
    change_emitter.subscribe(store.apply)
    yield store
    change_emitter.unsubscribe(store.apply)
    dashboard._state_store = None


@pytest.fixture
def anonymous_client(session_factory):
    """Client with the test database but real authentication."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides = {}


@pytest.fixture
def client(anonymous_client, current_user, state_store):
    """Client authenticated as current_user."""
    app.dependency_overrides[get_current_user] = lambda: current_user
    return anonymous_client
