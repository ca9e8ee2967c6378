"""Generic tenant entity service.

Clients, projects and tasks share one implementation. What differs between
them (table, columns, schemas, filters, schema steps, stats) lives in an
EntityDefinition that is injected at construction time.
"""

import asyncio
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from src.lexoffice.core.errors import NoFieldsToUpdate, ValidationError
from src.lexoffice.core.logging import get_logger
from src.lexoffice.core.security.validators import validate_identifier
from src.lexoffice.schemas.common import ListFilters, Pagination
from src.lexoffice.tenancy import SchemaReport, SchemaStep, ensure_schema
from src.lexoffice.tenancy import insert as insert_row
from src.lexoffice.tenancy import query as query_rows
from src.lexoffice.tenancy import soft_delete as soft_delete_row
from src.lexoffice.tenancy import update as update_row
from src.lexoffice.tenancy.helpers import Row, TenantExecutor

logger = get_logger(__name__)


@dataclass(frozen=True)
class EntityDefinition:
    """Everything that makes one tenant entity different from another.

    ``filter_columns`` maps ListFilters attribute names to the column they
    compare with by equality. ``required`` lists NOT NULL columns the caller
    must provide; ``created_by`` is always required and stamped by the service.
    """

    name: str
    table: str
    create_schema: type[BaseModel]
    update_schema: type[BaseModel]
    build_record: Callable[[Any], dict[str, Any]]
    stats_sql: str
    parse_stats: Callable[[Row], BaseModel]
    schema_steps: tuple[SchemaStep, ...] = ()
    columns: tuple[str, ...] = ()
    json_columns: tuple[str, ...] = ()
    required: tuple[str, ...] = ()
    search_columns: tuple[str, ...] = ()
    filter_columns: Mapping[str, str] = field(default_factory=dict)
    tag_column: str | None = "tags"

    def __post_init__(self) -> None:
        validate_identifier(self.table)
        for column in (
            *self.columns,
            *self.json_columns,
            *self.search_columns,
            *self.filter_columns.values(),
        ):
            validate_identifier(column)
        if self.tag_column is not None:
            validate_identifier(self.tag_column)

    @property
    def select_list(self) -> str:
        return ", ".join(self.columns) if self.columns else "*"


def _plain(value: Any) -> Any:
    """Unwrap enum members so the driver binds their string value."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    return value


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class TenantEntityService:
    """CRUD, listing and stats for one entity inside the caller's tenant schema.

    Stateless: the tenant handle is passed to every call, so one instance
    serves every request.
    """

    def __init__(self, definition: EntityDefinition):
        self.definition = definition

    def _parse(self, schema: type[BaseModel], data: BaseModel | Mapping[str, Any]) -> BaseModel:
        if isinstance(data, schema):
            return data
        if isinstance(data, BaseModel):
            data = data.model_dump(exclude_unset=True)
        try:
            return schema.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError.from_errors(e.errors()) from e

    async def ensure_schema(self, db: TenantExecutor) -> SchemaReport:
        """Bring this entity's table in the tenant schema up to date."""
        return await ensure_schema(db, self.definition.schema_steps)

    async def list(self, db: TenantExecutor, filters: ListFilters | None = None) -> dict[str, Any]:
        """List active records, newest first, with offset pagination.

        Returns:
            ``{"items": [...], "pagination": Pagination}``
        """
        filters = filters or ListFilters()
        definition = self.definition
        await self.ensure_schema(db)

        conditions = ["is_active = TRUE"]
        params: dict[str, Any] = {}
        for attr, column in definition.filter_columns.items():
            value = getattr(filters, attr, None)
            if value is not None and value != "":
                conditions.append(f"{column} = :{attr}")
                params[attr] = value
        if filters.search and definition.search_columns:
            matches = " OR ".join(f"{column} ILIKE :search" for column in definition.search_columns)
            conditions.append(f"({matches})")
            params["search"] = f"%{_escape_like(filters.search)}%"
        if filters.tags and definition.tag_column:
            conditions.append(f"jsonb_exists_any({definition.tag_column}, CAST(:tags AS TEXT[]))")
            params["tags"] = list(filters.tags)

        where = " AND ".join(conditions)
        rows_sql = (
            f"SELECT {definition.select_list} FROM {{schema}}.{definition.table} "
            f"WHERE {where} ORDER BY created_at DESC LIMIT :limit OFFSET :offset"
        )
        count_sql = f"SELECT COUNT(*) AS total FROM {{schema}}.{definition.table} WHERE {where}"

        rows, count = await asyncio.gather(
            query_rows(
                db,
                rows_sql,
                {**params, "limit": filters.limit, "offset": filters.offset},
                json_columns=definition.json_columns,
            ),
            query_rows(db, count_sql, params),
        )
        total = int(count[0]["total"]) if count else 0
        return {
            "items": rows,
            "pagination": Pagination.build(filters.page, filters.limit, total),
        }

    async def get_by_id(self, db: TenantExecutor, record_id: str) -> Row | None:
        """Fetch one active record, or None when no active row has this id.

        Malformed ids match nothing and also return None.
        """
        definition = self.definition
        await self.ensure_schema(db)
        rows = await query_rows(
            db,
            f"SELECT {definition.select_list} FROM {{schema}}.{definition.table} "
            "WHERE id::text = :record_id AND is_active = TRUE",
            {"record_id": str(record_id)},
            json_columns=definition.json_columns,
        )
        return rows[0] if rows else None

    async def create(
        self, db: TenantExecutor, data: BaseModel | Mapping[str, Any], created_by: str
    ) -> Row:
        """Validate, apply defaults, stamp the creator and insert.

        Raises:
            ValidationError: If a required field is missing or a value is invalid
        """
        definition = self.definition
        payload = self._parse(definition.create_schema, data)
        record = {
            column: _plain(value)
            for column, value in definition.build_record(payload).items()
            if value is not None
        }
        record["created_by"] = created_by

        await self.ensure_schema(db)
        row = await insert_row(
            db,
            definition.table,
            record,
            required=(*definition.required, "created_by"),
            json_columns=definition.json_columns,
        )
        logger.info(
            "Record created",
            entity=definition.name,
            table=definition.table,
            record_id=row.get("id"),
        )
        return row

    async def update(
        self, db: TenantExecutor, record_id: str, data: BaseModel | Mapping[str, Any]
    ) -> Row | None:
        """Write only the fields present in ``data``.

        Returns:
            The updated row, or None when no active row has this id

        Raises:
            NoFieldsToUpdate: If ``data`` sets no field
            ValidationError: If a value is invalid or a required field is set to null
        """
        definition = self.definition
        payload = self._parse(definition.update_schema, data)
        changes = payload.model_dump(exclude_unset=True)
        if not changes:
            raise NoFieldsToUpdate()

        nulled = [
            column
            for column in definition.required
            if column in changes and changes[column] is None
        ]
        if nulled:
            names = [to_camel(column) for column in nulled]
            raise ValidationError(f"Field cannot be null: {', '.join(names)}", fields=names)

        await self.ensure_schema(db)
        row = await update_row(
            db,
            definition.table,
            record_id,
            {column: _plain(value) for column, value in changes.items()},
            json_columns=definition.json_columns,
        )
        if row is None:
            return None
        logger.info(
            "Record updated",
            entity=definition.name,
            table=definition.table,
            record_id=record_id,
            fields=sorted(changes),
        )
        return row

    async def delete(self, db: TenantExecutor, record_id: str) -> bool:
        """Soft delete one active record.

        Returns:
            True if an active row was found and deactivated, False otherwise
        """
        definition = self.definition
        await self.ensure_schema(db)
        row = await soft_delete_row(
            db, definition.table, record_id, json_columns=definition.json_columns
        )
        if row is None:
            return False
        logger.info(
            "Record deleted", entity=definition.name, table=definition.table, record_id=record_id
        )
        return True

    async def stats(self, db: TenantExecutor) -> BaseModel:
        """Aggregate counters over active records."""
        definition = self.definition
        await self.ensure_schema(db)
        rows = await query_rows(db, definition.stats_sql)
        return definition.parse_stats(rows[0] if rows else {})
