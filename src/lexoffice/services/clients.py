"""Clients (CRM contacts) living in each tenant schema."""

from functools import lru_cache
from typing import Any

from src.lexoffice.schemas.client import ClientCreate, ClientStats, ClientUpdate
from src.lexoffice.services.entity_service import EntityDefinition, TenantEntityService
from src.lexoffice.tenancy.helpers import Row
from src.lexoffice.tenancy.schema import create_indexes, create_table

TABLE = "clients"
DEFAULT_COUNTRY = "BR"

CLIENT_COLUMNS_SQL = """
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    name VARCHAR NOT NULL,
    email VARCHAR NOT NULL,
    phone VARCHAR,
    organization VARCHAR,
    address JSONB DEFAULT '{}'::jsonb,
    budget DECIMAL(15,2),
    currency VARCHAR(3) DEFAULT 'BRL',
    level VARCHAR,
    status VARCHAR DEFAULT 'active',
    tags JSONB DEFAULT '[]'::jsonb,
    notes TEXT,
    description TEXT,
    cpf VARCHAR,
    rg VARCHAR,
    pis VARCHAR,
    cei VARCHAR,
    professional_title VARCHAR,
    marital_status VARCHAR,
    birth_date DATE,
    inss_status VARCHAR,
    amount_paid DECIMAL(15,2),
    referred_by VARCHAR,
    registered_by VARCHAR,
    created_by VARCHAR NOT NULL,
    created_at TIMESTAMP DEFAULT NOW(),
    updated_at TIMESTAMP DEFAULT NOW(),
    is_active BOOLEAN DEFAULT TRUE
"""

SCHEMA_STEPS = (
    create_table(TABLE, CLIENT_COLUMNS_SQL),
    *create_indexes(TABLE, ("name", "email", "status", "is_active", "created_by")),
)

STATS_SQL = f"""
    SELECT
        COUNT(*) AS total,
        COUNT(*) FILTER (WHERE status = 'active') AS active,
        COUNT(*) FILTER (WHERE status = 'inactive') AS inactive,
        COUNT(*) FILTER (WHERE status = 'pending') AS pending,
        COUNT(*) FILTER (WHERE created_at >= DATE_TRUNC('month', NOW())) AS this_month
    FROM {{schema}}.{TABLE}
    WHERE is_active = TRUE
"""


def build_client_record(data: ClientCreate) -> dict[str, Any]:
    """Map the create payload onto table columns."""
    record = data.model_dump(
        exclude={"mobile", "country", "state", "city", "address", "zip_code", "description"}
    )
    record["phone"] = data.mobile or data.phone
    record["notes"] = data.description or data.notes
    record["description"] = data.description
    record["address"] = {
        "street": data.address or "",
        "city": data.city or "",
        "state": data.state or "",
        "zipCode": data.zip_code or "",
        "country": data.country or DEFAULT_COUNTRY,
    }
    return record


def parse_client_stats(row: Row) -> ClientStats:
    return ClientStats(
        total=int(row.get("total") or 0),
        active=int(row.get("active") or 0),
        inactive=int(row.get("inactive") or 0),
        pending=int(row.get("pending") or 0),
        this_month=int(row.get("this_month") or 0),
    )


CLIENT_DEFINITION = EntityDefinition(
    name="Client",
    table=TABLE,
    create_schema=ClientCreate,
    update_schema=ClientUpdate,
    build_record=build_client_record,
    stats_sql=STATS_SQL,
    parse_stats=parse_client_stats,
    schema_steps=SCHEMA_STEPS,
    json_columns=("address", "tags"),
    required=("name", "email"),
    search_columns=("name", "email"),
    filter_columns={"status": "status"},
)


@lru_cache
def get_clients_service() -> TenantEntityService:
    """Get the process-wide clients service."""
    return TenantEntityService(CLIENT_DEFINITION)
