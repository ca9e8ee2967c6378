"""Tenant query executor.

A TenantDatabase binds one tenant to its schema for the lifetime of a single
request. SQL templates reference tables as ``{schema}.<table>``; the
placeholder is replaced with the quoted schema name and every value travels
as a bind parameter, so user data never becomes SQL text.
"""

from collections.abc import Mapping
from typing import Any, Final
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncEngine

from src.lexoffice.core.db.engine import get_engine
from src.lexoffice.core.errors import DatabaseConnectionError, QueryError, SchemaNotFound
from src.lexoffice.core.logging import get_logger
from src.lexoffice.core.security.validators import resolve_schema, validate_schema_name

logger = get_logger(__name__)

SCHEMA_PLACEHOLDER: Final[str] = "{schema}"

INVALID_SCHEMA_NAME: Final[str] = "3F000"
# connection_exception class, admin/crash shutdown, cannot_connect_now, too_many_connections
_CONNECTION_SQLSTATES: Final[tuple[str, ...]] = ("08", "57P01", "57P02", "57P03", "53300")

Row = dict[str, Any]


def _sqlstate(exc: DBAPIError) -> str | None:
    """Extract the PostgreSQL SQLSTATE from a wrapped driver error."""
    orig = exc.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return str(code)
    return None


def _normalize_row(row: Mapping[str, Any]) -> Row:
    return {key: str(value) if isinstance(value, UUID) else value for key, value in row.items()}


class TenantDatabase:
    """Per-request handle targeting exactly one tenant schema.

    The handle owns the schema name only. Connections come from the shared
    process-wide engine, one pooled connection per statement, so independent
    reads issued with asyncio.gather run concurrently.
    """

    def __init__(
        self,
        tenant_id: str,
        schema_name: str | None = None,
        engine: AsyncEngine | None = None,
    ):
        if schema_name is None:
            schema_name = resolve_schema(tenant_id)
        validate_schema_name(schema_name)
        self.tenant_id = tenant_id
        self.schema_name = schema_name
        self._engine = engine
        self._released = False

    def __repr__(self) -> str:
        return f"TenantDatabase(tenant_id={self.tenant_id!r}, schema_name={self.schema_name!r})"

    @property
    def engine(self) -> AsyncEngine:
        return self._engine if self._engine is not None else get_engine()

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Mark the handle as finished. Called when the request completes."""
        self._released = True

    def render(self, sql_template: str) -> str:
        """Replace every schema placeholder with the quoted schema name."""
        # Safe to quote directly: validate_schema_name only allows [a-z0-9_]
        return sql_template.replace(SCHEMA_PLACEHOLDER, f'"{self.schema_name}"')

    async def execute(
        self,
        sql_template: str,
        params: Mapping[str, Any] | None = None,
    ) -> list[Row]:
        """Run one statement against this tenant's schema.

        Args:
            sql_template: SQL containing ``{schema}`` and ``:name`` bind markers.
            params: Values for the bind markers.

        Returns:
            Result rows as dicts (empty for statements returning no rows).

        Raises:
            SchemaNotFound: The tenant schema was never provisioned.
            QueryError: Any other driver error.
            DatabaseConnectionError: Pool timeout or network failure.
        """
        if self._released:
            raise RuntimeError(f"{self!r} was released and cannot be reused")

        statement = self.render(sql_template)
        bound = dict(params or {})

        try:
            async with self.engine.begin() as connection:
                result = await connection.execute(text(statement), bound)
                rows = (
                    [_normalize_row(row) for row in result.mappings()]
                    if result.returns_rows
                    else []
                )
        except DBAPIError as e:
            raise self._translate_error(e, statement, bound) from e
        except (PoolTimeoutError, TimeoutError, OSError) as e:
            logger.error(
                "Database connection unavailable",
                schema=self.schema_name,
                statement=statement,
                param_names=sorted(bound),
                error=str(e),
            )
            raise DatabaseConnectionError("Database connection unavailable", statement) from e

        return rows

    def _translate_error(
        self, exc: DBAPIError, statement: str, bound: Mapping[str, Any]
    ) -> QueryError | DatabaseConnectionError:
        sqlstate = _sqlstate(exc)
        # Parameter values are redacted: only their names are logged
        log_context = {
            "schema": self.schema_name,
            "statement": statement,
            "param_names": sorted(bound),
            "sqlstate": sqlstate,
            "error_type": type(exc.orig).__name__,
        }

        is_connection_failure = exc.connection_invalidated or (
            sqlstate.startswith(_CONNECTION_SQLSTATES)
            if sqlstate
            else isinstance(exc, (OperationalError, InterfaceError))
        )
        if is_connection_failure:
            logger.error("Database connection failure", **log_context)
            return DatabaseConnectionError("Database connection failure", statement)

        if sqlstate == INVALID_SCHEMA_NAME:
            logger.error("Tenant schema not found", **log_context)
            return SchemaNotFound(self.schema_name, statement)

        logger.error("Tenant query failed", **log_context)
        return QueryError(f"Query failed ({sqlstate or 'unknown'})", statement, sqlstate)
