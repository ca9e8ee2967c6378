"""Tasks assigned to a single user, optionally linked to a project and client."""

from functools import lru_cache
from typing import Any

from src.lexoffice.schemas.task import TaskCreate, TaskStats, TaskUpdate
from src.lexoffice.services.entity_service import EntityDefinition, TenantEntityService
from src.lexoffice.tenancy.helpers import Row
from src.lexoffice.tenancy.schema import create_indexes, create_table

TABLE = "tasks"

# project_id / client_id are soft references: no FK across tables
TASK_COLUMNS_SQL = """
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    title VARCHAR NOT NULL,
    description TEXT,
    project_id VARCHAR,
    project_title VARCHAR,
    client_id VARCHAR,
    client_name VARCHAR,
    assigned_to VARCHAR NOT NULL,
    status VARCHAR DEFAULT 'not_started'
        CHECK (status IN ('not_started', 'in_progress', 'completed', 'on_hold', 'cancelled')),
    priority VARCHAR DEFAULT 'medium'
        CHECK (priority IN ('low', 'medium', 'high', 'urgent')),
    start_date DATE,
    end_date DATE,
    estimated_hours DECIMAL(5,2),
    actual_hours DECIMAL(5,2),
    progress INTEGER DEFAULT 0 CHECK (progress >= 0 AND progress <= 100),
    tags JSONB DEFAULT '[]'::jsonb,
    notes TEXT,
    subtasks JSONB DEFAULT '[]'::jsonb,
    created_by VARCHAR NOT NULL,
    created_at TIMESTAMP DEFAULT NOW(),
    updated_at TIMESTAMP DEFAULT NOW(),
    is_active BOOLEAN DEFAULT TRUE
"""

SCHEMA_STEPS = (
    create_table(TABLE, TASK_COLUMNS_SQL),
    *create_indexes(
        TABLE,
        ("assigned_to", "status", "priority", "project_id", "client_id", "is_active", "created_by"),
    ),
)

STATS_SQL = f"""
    SELECT
        COUNT(*) AS total,
        COUNT(*) FILTER (WHERE status = 'completed') AS completed,
        COUNT(*) FILTER (WHERE status = 'in_progress') AS in_progress,
        COUNT(*) FILTER (WHERE status = 'not_started') AS not_started,
        COUNT(*) FILTER (WHERE status = 'on_hold') AS on_hold,
        COUNT(*) FILTER (WHERE priority = 'urgent') AS urgent,
        COUNT(*) FILTER (
            WHERE end_date < CURRENT_DATE AND status NOT IN ('completed', 'cancelled')
        ) AS overdue
    FROM {{schema}}.{TABLE}
    WHERE is_active = TRUE
"""


def build_task_record(data: TaskCreate) -> dict[str, Any]:
    return data.model_dump()


def parse_task_stats(row: Row) -> TaskStats:
    return TaskStats(
        **{
            key: int(row.get(key) or 0)
            for key in (
                "total",
                "completed",
                "in_progress",
                "not_started",
                "on_hold",
                "urgent",
                "overdue",
            )
        }
    )


TASK_DEFINITION = EntityDefinition(
    name="Task",
    table=TABLE,
    create_schema=TaskCreate,
    update_schema=TaskUpdate,
    build_record=build_task_record,
    stats_sql=STATS_SQL,
    parse_stats=parse_task_stats,
    schema_steps=SCHEMA_STEPS,
    json_columns=("tags", "subtasks"),
    required=("title", "assigned_to"),
    search_columns=("title", "description"),
    filter_columns={
        "status": "status",
        "priority": "priority",
        "assigned_to": "assigned_to",
        "project_id": "project_id",
    },
)


@lru_cache
def get_tasks_service() -> TenantEntityService:
    """Get the process-wide tasks service."""
    return TenantEntityService(TASK_DEFINITION)
