"""Tests for the demo data loader."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from orderdesk.core.database import create_engine_for_url
from orderdesk.core.seed import PRODUCTS, SALES_ORDERS, main, resolve_database_url, seed
from orderdesk.models import JobCard, Product, SalesOrder, User


class TestResolveDatabaseUrl:
    def test_explicit_url_wins(self):
        env = {"DATABASE_URL": "sqlite:///env.db", "POSTGRES_HOST": "db"}
        assert resolve_database_url("sqlite:///cli.db", env) == "sqlite:///cli.db"

    def test_database_url_before_postgres_parts(self):
        assert resolve_database_url(None, {"DATABASE_URL": "sqlite:///env.db", "POSTGRES_HOST": "db"}) == "sqlite:///env.db"

    def test_postgres_parts(self):
        env = {"POSTGRES_HOST": "db", "POSTGRES_USER": "desk", "POSTGRES_PASSWORD": "pw", "POSTGRES_DB": "springs"}
        assert resolve_database_url(None, env) == "postgresql+asyncpg://desk:pw@db:5432/springs"


async def counts(url):
    engine = create_engine_for_url(url)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        result = {
            model.__name__: (await session.execute(select(func.count()).select_from(model))).scalar()
            for model in (Product, SalesOrder, JobCard, User)
        }
    await engine.dispose()
    return result


@pytest.mark.asyncio
async def test_seed_is_idempotent(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'seed.db'}"

    await seed(url)
    await seed(url)

    expected_job_cards = sum(len(lines) for *_, lines in SALES_ORDERS)
    assert await counts(url) == {
        "Product": len(PRODUCTS),
        "SalesOrder": len(SALES_ORDERS),
        "JobCard": expected_job_cards,
        "User": 2,
    }


def test_unreachable_database_exits_with_error():
    assert main(["--database-url", "mysql://nowhere/orderdesk"]) == 1
