"""Additive, fault-tolerant schema steps for tenant tables.

Every domain service declares an ordered tuple of steps (create table, add
columns introduced later, backfill, tighten constraints, indexes) and runs
them before touching its table. Each step is idempotent on an up-to-date
schema and runs in its own transaction, so one failing step never blocks the
next one or the request. Tenants provisioned at different times drift, and
that drift is expected.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from src.lexoffice.core.errors import QueryError
from src.lexoffice.core.logging import get_logger
from src.lexoffice.core.security.validators import validate_identifier
from src.lexoffice.tenancy.helpers import TenantExecutor

logger = get_logger(__name__)


@dataclass(frozen=True)
class SchemaStep:
    name: str
    sql: str


@dataclass(frozen=True)
class SchemaReport:
    applied: tuple[str, ...]
    failed: tuple[str, ...]

    @property
    def ok(self) -> bool:
        return not self.failed


def create_table(table: str, columns_sql: str) -> SchemaStep:
    validate_identifier(table)
    return SchemaStep(
        f"create_{table}",
        f"CREATE TABLE IF NOT EXISTS {{schema}}.{table} ({columns_sql})",
    )


def add_column(table: str, column: str, definition: str) -> SchemaStep:
    validate_identifier(table)
    validate_identifier(column)
    return SchemaStep(
        f"add_{table}_{column}",
        f"ALTER TABLE {{schema}}.{table} ADD COLUMN IF NOT EXISTS {column} {definition}",
    )


def set_not_null(table: str, column: str) -> SchemaStep:
    validate_identifier(table)
    validate_identifier(column)
    return SchemaStep(
        f"not_null_{table}_{column}",
        f"ALTER TABLE {{schema}}.{table} ALTER COLUMN {column} SET NOT NULL",
    )


def when_column_exists(step: SchemaStep, table: str, column: str) -> SchemaStep:
    """Wrap ``step`` so it only runs on tables that still have ``column``.

    Legacy backfills read columns that fresh tables never get; the guard
    turns those into no-ops instead of failed steps.
    """
    validate_identifier(table)
    validate_identifier(column)
    # {schema} renders quoted; the literal needs the bare name
    return SchemaStep(
        step.name,
        "DO $$ BEGIN "
        "IF EXISTS (SELECT 1 FROM information_schema.columns "
        "WHERE table_schema = trim(both '\"' from '{schema}') "
        f"AND table_name = '{table}' AND column_name = '{column}') THEN "
        f"{step.sql}; "
        "END IF; END $$",
    )


def create_indexes(table: str, columns: Iterable[str]) -> tuple[SchemaStep, ...]:
    validate_identifier(table)
    steps = []
    for column in columns:
        validate_identifier(column)
        index_name = f"idx_{table}_{column}"
        steps.append(
            SchemaStep(
                index_name,
                f"CREATE INDEX IF NOT EXISTS {index_name} ON {{schema}}.{table} ({column})",
            )
        )
    return tuple(steps)


async def ensure_schema(db: TenantExecutor, steps: Sequence[SchemaStep]) -> SchemaReport:
    """Run every step in order, logging and skipping the ones that fail.

    Statement failures (including a missing tenant schema) are logged and
    skipped. Connection failures propagate: nothing after them could succeed.
    """
    applied: list[str] = []
    failed: list[str] = []
    for step in steps:
        try:
            await db.execute(step.sql)
        except QueryError as e:
            failed.append(step.name)
            logger.warning(
                "Schema step failed (ignored)",
                step=step.name,
                schema=db.schema_name,
                error_type=type(e).__name__,
                sqlstate=e.sqlstate,
            )
        else:
            applied.append(step.name)

    if failed:
        logger.info(
            "Schema steps completed with failures",
            schema=db.schema_name,
            applied=len(applied),
            failed=failed,
        )
    return SchemaReport(applied=tuple(applied), failed=tuple(failed))
