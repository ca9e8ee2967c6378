"""Database utilities - engine, sessions, migrations."""

from src.lexoffice.core.db.engine import dispose_engine, get_engine
from src.lexoffice.core.db.migrations import run_migrations_async, run_migrations_sync
from src.lexoffice.core.db.session import (
    create_tenant_schema,
    drop_tenant_schema,
    get_public_session,
)

__all__ = [
    # Engine
    "dispose_engine",
    "get_engine",
    # Sessions / schemas
    "create_tenant_schema",
    "drop_tenant_schema",
    "get_public_session",
    # Migrations
    "run_migrations_async",
    "run_migrations_sync",
]
