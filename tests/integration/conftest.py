"""Integration test fixtures for database and HTTP client operations.

These fixtures require external resources (PostgreSQL database). Tests are
skipped when the database configured by DATABASE_URL cannot be reached.
"""

import asyncio
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from src.lexoffice.core import db
from src.lexoffice.core.config import get_settings
from src.lexoffice.core.db import create_tenant_schema, drop_tenant_schema, run_migrations_sync
from src.lexoffice.main import create_app
from src.lexoffice.models.public import Tenant
from src.lexoffice.repositories import TenantRepository
from src.lexoffice.tenancy import TenantDatabase
from tests.factories import TenantFactory


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Create test database engine and ensure public schema migrations are applied."""
    await db.dispose_engine()

    settings = get_settings()
    test_engine = create_async_engine(settings.database_url, poolclass=NullPool)

    try:
        async with test_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        await test_engine.dispose()
        pytest.skip(f"PostgreSQL not available: {type(e).__name__}")

    # Run public schema migrations to ensure the tenant directory exists
    await asyncio.to_thread(run_migrations_sync)

    yield test_engine
    await test_engine.dispose()


async def _provision(engine: AsyncEngine, tenant: Tenant) -> Tenant:
    async with AsyncSession(engine, expire_on_commit=False) as session:
        TenantRepository(session).add(tenant)
        await session.commit()
    await create_tenant_schema(tenant.schema_name, engine)
    return tenant


async def _deprovision(engine: AsyncEngine, tenant: Tenant) -> None:
    await drop_tenant_schema(tenant.schema_name, engine)
    async with engine.begin() as conn:
        await conn.execute(
            text("DELETE FROM public.tenants WHERE id = :id"), {"id": tenant.id}
        )


@pytest.fixture
async def tenant(engine: AsyncEngine) -> AsyncGenerator[Tenant]:
    """Create an isolated tenant with an empty schema for each test."""
    created = await _provision(engine, TenantFactory.build())
    yield created
    await _deprovision(engine, created)


@pytest.fixture
async def other_tenant(engine: AsyncEngine) -> AsyncGenerator[Tenant]:
    """A second tenant, for isolation tests."""
    created = await _provision(engine, TenantFactory.build())
    yield created
    await _deprovision(engine, created)


@pytest.fixture
def tenant_db(engine: AsyncEngine, tenant: Tenant) -> TenantDatabase:
    return TenantDatabase(tenant.id, engine=engine)


@pytest.fixture
def other_tenant_db(engine: AsyncEngine, other_tenant: Tenant) -> TenantDatabase:
    return TenantDatabase(other_tenant.id, engine=engine)


@pytest.fixture
async def client(engine: AsyncEngine) -> AsyncGenerator[AsyncClient]:
    """HTTP client against the real app and database."""
    await db.dispose_engine()

    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    await db.dispose_engine()
