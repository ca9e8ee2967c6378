"""Alembic environment for the public schema.

Only ``public.tenants`` is versioned here. Tables inside tenant schemas are
evolved by the domain services and stay invisible to autogenerate.
"""

import os
from logging.config import fileConfig

from sqlalchemy import create_engine, pool, text
from sqlmodel import SQLModel

from alembic import context
from src.lexoffice.core.config import get_settings
from src.lexoffice.models import Tenant  # noqa: F401  registers public.tenants

config = context.config

if config.config_file_name is not None and os.path.exists(config.config_file_name):
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata

PUBLIC_SCHEMA = "public"


def sync_url() -> str:
    """Migrations URL (falls back to the app URL) for the psycopg2 driver."""
    settings = get_settings()
    url = settings.database_migrations_url or settings.database_url
    return url.replace("+asyncpg", "")


def include_object(obj, name, type_, reflected, compare_to):
    if type_ != "table":
        return True
    return getattr(obj, "schema", None) == PUBLIC_SCHEMA


def run_migrations_offline() -> None:
    context.configure(
        url=sync_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        include_object=include_object,
        version_table_schema=PUBLIC_SCHEMA,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(sync_url(), poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            # A role default search_path must not route DDL into a tenant schema
            connection.execute(text(f"SET search_path TO {PUBLIC_SCHEMA}"))
            connection.commit()
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                include_object=include_object,
                version_table_schema=PUBLIC_SCHEMA,
                compare_type=True,
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
