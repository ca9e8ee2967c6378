"""Process-wide async engine.

Every tenant handle and every public-schema session draws connections from
this one pool. Nothing here knows about tenants.
"""

import ssl
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.lexoffice.core.config import Settings, get_settings

_engine: AsyncEngine | None = None


def build_ssl_context(ssl_mode: str) -> ssl.SSLContext | None:
    """Translate a libpq-style sslmode into an asyncpg SSL context.

    ``prefer`` and ``require`` encrypt without verifying the server;
    ``verify-ca`` checks the chain and ``verify-full`` the hostname as well.
    """
    if ssl_mode == "disable":
        return None
    context = ssl.create_default_context()
    if ssl_mode in ("prefer", "require"):
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    else:
        context.check_hostname = ssl_mode == "verify-full"
        context.verify_mode = ssl.CERT_REQUIRED
    return context


def engine_options(settings: Settings) -> dict[str, Any]:
    connect_args: dict[str, Any] = {
        "statement_cache_size": settings.database_statement_cache_size,
        "server_settings": {"application_name": settings.app_name},
    }
    if settings.database_command_timeout is not None:
        connect_args["command_timeout"] = settings.database_command_timeout
    ssl_context = build_ssl_context(settings.database_ssl_mode)
    if ssl_context is not None:
        connect_args["ssl"] = ssl_context

    return {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_timeout": settings.database_pool_timeout,
        "pool_pre_ping": True,
        "connect_args": connect_args,
    }


def get_engine() -> AsyncEngine:
    """Return the shared engine, creating it on first use."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_async_engine(settings.database_url, **engine_options(settings))
    return _engine


async def dispose_engine() -> None:
    """Close pooled connections. The next get_engine() call builds a new pool."""
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None
