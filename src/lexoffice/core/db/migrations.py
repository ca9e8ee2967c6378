"""Alembic runner for the public schema (tenant directory)."""

import asyncio

from alembic.config import Config

from alembic import command


def run_migrations_sync() -> None:
    """Upgrade the public schema to head.

    Tenant schemas are not managed by Alembic; each domain service evolves
    its own table through additive schema steps.
    """
    alembic_cfg = Config("alembic.ini")
    command.upgrade(alembic_cfg, "head")


async def run_migrations_async() -> None:
    """Run public migrations from async context without blocking the loop."""
    await asyncio.to_thread(run_migrations_sync)
