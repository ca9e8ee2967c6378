"""Database session management for the public schema (tenant directory)."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.lexoffice.core.db.engine import get_engine
from src.lexoffice.core.security.validators import validate_schema_name


@asynccontextmanager
async def get_public_session(
    engine: AsyncEngine | None = None,
) -> AsyncGenerator[AsyncSession]:
    """Create a session for the public schema.

    Tenant data is never read through this session; tenant schemas are only
    reached through TenantDatabase, which qualifies every statement.
    """
    if engine is None:
        engine = get_engine()

    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session


async def create_tenant_schema(schema_name: str, engine: AsyncEngine | None = None) -> None:
    """Create an empty tenant schema. Idempotent.

    Tables are created lazily by each domain service's schema steps.
    """
    validate_schema_name(schema_name)
    if engine is None:
        engine = get_engine()

    async with engine.begin() as connection:
        quoted_schema = await connection.scalar(
            text("SELECT quote_ident(:schema)").bindparams(schema=schema_name)
        )
        await connection.execute(text(f"CREATE SCHEMA IF NOT EXISTS {quoted_schema}"))


async def drop_tenant_schema(schema_name: str, engine: AsyncEngine | None = None) -> bool:
    """Drop a tenant schema and everything in it.

    Returns:
        True if the schema existed, False if it was already gone.
    """
    validate_schema_name(schema_name)
    if engine is None:
        engine = get_engine()

    async with engine.begin() as connection:
        schema_exists = await connection.scalar(
            text(
                """
                SELECT EXISTS(
                    SELECT 1 FROM information_schema.schemata
                    WHERE schema_name = :schema
                )
                """
            ).bindparams(schema=schema_name)
        )
        if schema_exists:
            quoted_schema = await connection.scalar(
                text("SELECT quote_ident(:schema)").bindparams(schema=schema_name)
            )
            await connection.execute(text(f"DROP SCHEMA IF EXISTS {quoted_schema} CASCADE"))

    return bool(schema_exists)
