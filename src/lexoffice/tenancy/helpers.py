"""Generic CRUD helpers over a TenantDatabase.

These four functions are the only place where INSERT/UPDATE statements are
generated. Identifiers come from entity definitions and are validated; values
are always bound. Lists and dicts are serialized to JSON here, exactly once,
and the column is cast to JSONB in the statement. Callers must pass native
structures, never pre-serialized JSON strings.
"""

import json
from collections.abc import Collection, Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Protocol

from src.lexoffice.core.errors import NoFieldsToUpdate, ValidationError
from src.lexoffice.core.security.validators import validate_identifier

Row = dict[str, Any]


class TenantExecutor(Protocol):
    """What the helpers need from a TenantDatabase."""

    schema_name: str

    async def execute(
        self, sql_template: str, params: Mapping[str, Any] | None = None
    ) -> list[Row]: ...


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def is_structured(value: Any) -> bool:
    return isinstance(value, (list, tuple, dict))


def serialize_json(value: Any) -> str:
    return json.dumps(list(value) if isinstance(value, tuple) else value, default=_json_default)


def decode_json_columns(row: Row, json_columns: Iterable[str]) -> Row:
    """Decode JSON columns the driver handed back as text."""
    for column in json_columns:
        value = row.get(column)
        if isinstance(value, (str, bytes)):
            row[column] = json.loads(value)
    return row


def _bind_value(column: str, value: Any, json_columns: Collection[str]) -> tuple[str, Any]:
    """Return the SQL value expression and bound value for one column."""
    param = f"v_{column}"
    if is_structured(value):
        return f"CAST(:{param} AS JSONB)", serialize_json(value)
    if column in json_columns and value is not None:
        # Scalars destined for a JSONB column still need JSON encoding
        return f"CAST(:{param} AS JSONB)", json.dumps(value, default=_json_default)
    return f":{param}", value


async def query(
    db: TenantExecutor,
    sql: str,
    params: Mapping[str, Any] | None = None,
    json_columns: Iterable[str] = (),
) -> list[Row]:
    """Run a read statement and return its rows with JSON columns decoded."""
    rows = await db.execute(sql, params)
    json_columns = tuple(json_columns)
    return [decode_json_columns(row, json_columns) for row in rows]


async def insert(
    db: TenantExecutor,
    table: str,
    data: Mapping[str, Any],
    required: Iterable[str] = (),
    json_columns: Collection[str] = (),
) -> Row:
    """Insert one row and return it as stored, including server defaults.

    Raises:
        ValidationError: If any required column is absent or None.
    """
    validate_identifier(table)
    missing = [column for column in required if data.get(column) is None]
    if missing:
        raise ValidationError(f"Missing required field: {', '.join(missing)}", fields=missing)
    if not data:
        raise ValidationError("No fields to insert")

    columns: list[str] = []
    values: list[str] = []
    params: dict[str, Any] = {}
    for column, value in data.items():
        validate_identifier(column)
        expression, bound = _bind_value(column, value, json_columns)
        columns.append(column)
        values.append(expression)
        params[f"v_{column}"] = bound

    sql = (
        f"INSERT INTO {{schema}}.{table} ({', '.join(columns)}) "
        f"VALUES ({', '.join(values)}) RETURNING *"
    )
    rows = await query(db, sql, params, json_columns=_returned_json(data, json_columns))
    return rows[0]


async def update(
    db: TenantExecutor,
    table: str,
    record_id: str,
    data: Mapping[str, Any],
    json_columns: Collection[str] = (),
) -> Row | None:
    """Apply a sparse update to one active row.

    Only the keys present in ``data`` are written; ``updated_at`` is always
    refreshed.

    Returns:
        The updated row, or None when no active row has this id.

    Raises:
        NoFieldsToUpdate: If ``data`` is empty.
    """
    validate_identifier(table)
    if not data:
        raise NoFieldsToUpdate()

    assignments: list[str] = []
    params: dict[str, Any] = {"record_id": str(record_id)}
    for column, value in data.items():
        validate_identifier(column)
        if column in ("id", "updated_at"):
            continue
        expression, bound = _bind_value(column, value, json_columns)
        assignments.append(f"{column} = {expression}")
        params[f"v_{column}"] = bound
    if not assignments:
        raise NoFieldsToUpdate()
    assignments.append("updated_at = NOW()")

    sql = (
        f"UPDATE {{schema}}.{table} SET {', '.join(assignments)} "
        "WHERE id::text = :record_id AND is_active = TRUE RETURNING *"
    )
    rows = await query(db, sql, params, json_columns=_returned_json(data, json_columns))
    return rows[0] if rows else None


async def soft_delete(
    db: TenantExecutor,
    table: str,
    record_id: str,
    json_columns: Iterable[str] = (),
) -> Row | None:
    """Deactivate one row. The row stays physically present.

    Returns:
        The now-inactive row, or None when no active row has this id.
    """
    validate_identifier(table)
    sql = (
        f"UPDATE {{schema}}.{table} SET is_active = FALSE, updated_at = NOW() "
        "WHERE id::text = :record_id AND is_active = TRUE RETURNING *"
    )
    rows = await query(db, sql, {"record_id": str(record_id)}, json_columns=json_columns)
    return rows[0] if rows else None


def _returned_json(data: Mapping[str, Any], json_columns: Collection[str]) -> set[str]:
    return set(json_columns) | {column for column, value in data.items() if is_structured(value)}
