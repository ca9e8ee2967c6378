"""Projects (legal cases / deals moving through a sales pipeline).

Tenant tables for projects predate several columns. The schema steps add
them, backfill dates for legacy rows and only then tighten the date columns
to NOT NULL. The legacy ``end_date`` backfill only runs on tables that still
have that column; any other failing step is logged and skipped.
"""

from functools import lru_cache
from typing import Any

from src.lexoffice.schemas.project import (
    ProjectCreate,
    ProjectPriorityCounts,
    ProjectStats,
    ProjectStatusCounts,
    ProjectUpdate,
)
from src.lexoffice.services.entity_service import EntityDefinition, TenantEntityService
from src.lexoffice.tenancy.helpers import Row
from src.lexoffice.tenancy.schema import (
    SchemaStep,
    add_column,
    create_indexes,
    create_table,
    set_not_null,
    when_column_exists,
)

TABLE = "projects"

PROJECT_COLUMNS_SQL = """
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    title VARCHAR NOT NULL,
    description TEXT,
    client_name VARCHAR NOT NULL,
    client_id VARCHAR,
    budget DECIMAL(15,2) DEFAULT 0,
    status VARCHAR DEFAULT 'contacted',
    priority VARCHAR DEFAULT 'medium',
    progress INTEGER DEFAULT 0 CHECK (progress >= 0 AND progress <= 100),
    start_date TIMESTAMP WITH TIME ZONE,
    tags JSONB DEFAULT '[]'::jsonb,
    notes TEXT,
    created_by VARCHAR NOT NULL,
    created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
    updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
    is_active BOOLEAN DEFAULT TRUE
"""

SCHEMA_STEPS = (
    create_table(TABLE, PROJECT_COLUMNS_SQL),
    add_column(TABLE, "organization", "VARCHAR(255)"),
    add_column(TABLE, "address", "VARCHAR(255)"),
    add_column(TABLE, "currency", "VARCHAR(3) DEFAULT 'BRL'"),
    add_column(TABLE, "due_date", "TIMESTAMP WITH TIME ZONE"),
    add_column(TABLE, "completed_at", "TIMESTAMP WITH TIME ZONE"),
    add_column(TABLE, "assigned_to", "JSONB DEFAULT '[]'::jsonb"),
    add_column(TABLE, "contacts", "JSONB DEFAULT '[]'::jsonb"),
    when_column_exists(
        SchemaStep(
            "backfill_projects_due_date_from_end_date",
            f"UPDATE {{schema}}.{TABLE} SET due_date = end_date "
            "WHERE due_date IS NULL AND end_date IS NOT NULL",
        ),
        TABLE,
        "end_date",
    ),
    SchemaStep(
        "backfill_projects_start_date",
        f"UPDATE {{schema}}.{TABLE} SET start_date = created_at WHERE start_date IS NULL",
    ),
    SchemaStep(
        "backfill_projects_due_date",
        f"UPDATE {{schema}}.{TABLE} SET due_date = created_at + INTERVAL '30 days' "
        "WHERE due_date IS NULL",
    ),
    set_not_null(TABLE, "start_date"),
    set_not_null(TABLE, "due_date"),
    *create_indexes(TABLE, ("status", "priority", "client_id", "is_active", "created_by")),
)

STATS_SQL = f"""
    SELECT
        COUNT(*) AS total,
        COALESCE(AVG(progress), 0) AS avg_progress,
        COUNT(*) FILTER (
            WHERE due_date < CURRENT_DATE AND status NOT IN ('won', 'lost')
        ) AS overdue,
        COALESCE(SUM(CASE WHEN status = 'won' THEN budget ELSE 0 END), 0)
            AS revenue,
        COUNT(*) FILTER (WHERE status = 'contacted') AS contacted,
        COUNT(*) FILTER (WHERE status = 'proposal') AS proposal,
        COUNT(*) FILTER (WHERE status = 'won') AS won,
        COUNT(*) FILTER (WHERE status = 'lost') AS lost,
        COUNT(*) FILTER (WHERE priority = 'low') AS priority_low,
        COUNT(*) FILTER (WHERE priority = 'medium') AS priority_medium,
        COUNT(*) FILTER (WHERE priority = 'high') AS priority_high
    FROM {{schema}}.{TABLE}
    WHERE is_active = TRUE
"""


def build_project_record(data: ProjectCreate) -> dict[str, Any]:
    return data.model_dump()


def parse_project_stats(row: Row) -> ProjectStats:
    def count(key: str) -> int:
        return int(row.get(key) or 0)

    return ProjectStats(
        total=count("total"),
        avg_progress=round(float(row.get("avg_progress") or 0)),
        overdue=count("overdue"),
        revenue=float(row.get("revenue") or 0),
        by_status=ProjectStatusCounts(
            contacted=count("contacted"),
            proposal=count("proposal"),
            won=count("won"),
            lost=count("lost"),
        ),
        by_priority=ProjectPriorityCounts(
            low=count("priority_low"),
            medium=count("priority_medium"),
            high=count("priority_high"),
        ),
    )


PROJECT_DEFINITION = EntityDefinition(
    name="Project",
    table=TABLE,
    create_schema=ProjectCreate,
    update_schema=ProjectUpdate,
    build_record=build_project_record,
    stats_sql=STATS_SQL,
    parse_stats=parse_project_stats,
    schema_steps=SCHEMA_STEPS,
    json_columns=("tags", "assigned_to", "contacts"),
    required=("title", "client_name", "start_date", "due_date"),
    search_columns=("title", "client_name", "organization", "description"),
    filter_columns={"status": "status", "priority": "priority"},
)


@lru_cache
def get_projects_service() -> TenantEntityService:
    """Get the process-wide projects service."""
    return TenantEntityService(PROJECT_DEFINITION)
