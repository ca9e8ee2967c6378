"""End-to-end tenant entity behavior against PostgreSQL."""

import pytest

from src.lexoffice.core.errors import SchemaNotFound
from src.lexoffice.schemas.common import ListFilters
from src.lexoffice.services import get_clients_service, get_projects_service, get_tasks_service
from src.lexoffice.tenancy import TenantDatabase

pytestmark = pytest.mark.integration

CLIENT = {
    "name": "Ana Souza",
    "email": "ana@example.com",
    "mobile": "+55 81 99999-0000",
    "city": "Recife",
    "state": "PE",
    "tags": ["vip", "inss"],
    "budget": "1500.00",
}

PROJECT = {
    "title": "Aposentadoria por idade",
    "clientName": "Ana Souza",
    "startDate": "2025-01-10",
    "dueDate": "2025-03-10",
}


async def test_client_lifecycle(tenant_db: TenantDatabase):
    service = get_clients_service()

    created = await service.create(tenant_db, CLIENT, created_by="user-1")
    record_id = created["id"]

    fetched = await service.get_by_id(tenant_db, record_id)
    assert fetched["name"] == "Ana Souza"
    assert fetched["phone"] == "+55 81 99999-0000"
    assert fetched["status"] == "active"
    assert fetched["created_by"] == "user-1"

    updated = await service.update(tenant_db, record_id, {"status": "inactive"})
    assert updated["status"] == "inactive"
    assert updated["name"] == "Ana Souza"
    assert updated["tags"] == ["vip", "inss"]

    assert await service.delete(tenant_db, record_id) is True

    assert await service.get_by_id(tenant_db, record_id) is None
    result = await service.list(tenant_db)
    assert result["items"] == []


async def test_json_columns_stored_as_structures(tenant_db: TenantDatabase):
    created = await get_clients_service().create(tenant_db, CLIENT, created_by="user-1")

    rows = await tenant_db.execute(
        "SELECT jsonb_typeof(address) AS address_type, jsonb_typeof(tags) AS tags_type "
        "FROM {schema}.clients WHERE id::text = :id",
        {"id": created["id"]},
    )

    assert rows == [{"address_type": "object", "tags_type": "array"}]
    assert created["address"]["city"] == "Recife"
    assert created["address"]["country"] == "BR"


async def test_soft_delete_keeps_row(tenant_db: TenantDatabase):
    service = get_tasks_service()
    created = await service.create(
        tenant_db, {"title": "Protocolar", "assignedTo": "user-7"}, created_by="user-1"
    )

    assert await service.delete(tenant_db, created["id"]) is True

    rows = await tenant_db.execute(
        "SELECT is_active FROM {schema}.tasks WHERE id::text = :id", {"id": created["id"]}
    )
    assert rows == [{"is_active": False}]
    assert await service.delete(tenant_db, created["id"]) is False
    assert await service.update(tenant_db, created["id"], {"progress": 50}) is None


async def test_sparse_update_leaves_other_columns(tenant_db: TenantDatabase):
    service = get_projects_service()
    created = await service.create(
        tenant_db, {**PROJECT, "budget": "5000", "tags": ["rural"]}, created_by="user-1"
    )

    updated = await service.update(tenant_db, created["id"], {"progress": 40})

    assert updated["progress"] == 40
    assert updated["title"] == created["title"]
    assert updated["tags"] == ["rural"]
    assert updated["due_date"] == created["due_date"]
    assert updated["updated_at"] >= created["updated_at"]


async def test_update_stores_empty_values_exactly(tenant_db: TenantDatabase):
    service = get_clients_service()
    created = await service.create(
        tenant_db, {**CLIENT, "notes": "ligar amanha"}, created_by="user-1"
    )

    await service.update(tenant_db, created["id"], {"notes": "", "tags": []})

    fetched = await service.get_by_id(tenant_db, created["id"])
    assert fetched["notes"] == ""
    assert fetched["tags"] == []
    assert fetched["name"] == "Ana Souza"


async def test_malformed_id_is_not_found(tenant_db: TenantDatabase):
    await get_clients_service().create(tenant_db, CLIENT, created_by="user-1")

    assert await get_clients_service().get_by_id(tenant_db, "not-a-uuid") is None


async def test_tenants_are_isolated(tenant_db: TenantDatabase, other_tenant_db: TenantDatabase):
    service = get_clients_service()
    created = await service.create(tenant_db, CLIENT, created_by="user-1")

    other = await service.list(other_tenant_db)

    assert other["items"] == []
    assert other["pagination"].total == 0
    assert await service.get_by_id(other_tenant_db, created["id"]) is None
    assert await service.delete(other_tenant_db, created["id"]) is False
    assert (await service.get_by_id(tenant_db, created["id"]))["is_active"] is True


async def test_pagination_over_120_rows(tenant_db: TenantDatabase):
    service = get_tasks_service()
    await service.ensure_schema(tenant_db)
    await tenant_db.execute(
        "INSERT INTO {schema}.tasks (title, assigned_to, created_by) "
        "SELECT 'Task ' || n, 'user-1', 'user-1' FROM generate_series(1, 120) AS n"
    )

    first = await service.list(tenant_db, ListFilters(page=1, limit=50))
    last = await service.list(tenant_db, ListFilters(page=3, limit=50))

    assert len(first["items"]) == 50
    assert first["pagination"].total_pages == 3
    assert first["pagination"].has_next is True
    assert len(last["items"]) == 20
    assert last["pagination"].has_next is False
    assert last["pagination"].has_prev is True


async def test_combined_filters(tenant_db: TenantDatabase):
    service = get_tasks_service()
    for title, status, tags in [
        ("Protocolar pedido", "in_progress", ["inss"]),
        ("Protocolar recurso", "completed", ["inss"]),
        ("Revisar contrato", "in_progress", ["civil"]),
    ]:
        await service.create(
            tenant_db,
            {"title": title, "assignedTo": "user-7", "status": status, "tags": tags},
            created_by="user-1",
        )

    result = await service.list(
        tenant_db,
        ListFilters(search="protocolar", status="in_progress", tags=["inss", "other"]),
    )

    assert [row["title"] for row in result["items"]] == ["Protocolar pedido"]


async def test_search_treats_wildcards_literally(tenant_db: TenantDatabase):
    service = get_clients_service()
    await service.create(tenant_db, {**CLIENT, "name": "100% Office"}, created_by="user-1")
    await service.create(tenant_db, {**CLIENT, "name": "1000 Office"}, created_by="user-1")

    result = await service.list(tenant_db, ListFilters(search="100%"))

    assert [row["name"] for row in result["items"]] == ["100% Office"]


async def test_stats(tenant_db: TenantDatabase):
    service = get_tasks_service()
    for status, priority, end_date in [
        ("completed", "low", "2020-01-01"),
        ("in_progress", "urgent", "2020-01-01"),
        ("not_started", "medium", None),
    ]:
        payload = {"title": "t", "assignedTo": "u", "status": status, "priority": priority}
        if end_date:
            payload["endDate"] = end_date
        await service.create(tenant_db, payload, created_by="user-1")

    stats = await service.stats(tenant_db)

    assert stats.total == 3
    assert stats.completed == 1
    assert stats.in_progress == 1
    assert stats.urgent == 1
    # The completed task is past its end date but is not overdue
    assert stats.overdue == 1


async def test_project_schema_steps_are_repeatable(tenant_db: TenantDatabase):
    service = get_projects_service()

    first = await service.ensure_schema(tenant_db)
    second = await service.ensure_schema(tenant_db)

    # Fresh tables never had end_date; its backfill is a no-op, not a failure
    assert first.ok
    assert second.ok
    assert "backfill_projects_due_date_from_end_date" in first.applied


async def test_legacy_project_rows_backfilled(tenant_db: TenantDatabase):
    await tenant_db.execute(
        """
        CREATE TABLE {schema}.projects (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            title VARCHAR NOT NULL,
            description TEXT,
            client_name VARCHAR NOT NULL,
            client_id VARCHAR,
            budget DECIMAL(15,2) DEFAULT 0,
            status VARCHAR DEFAULT 'contacted',
            priority VARCHAR DEFAULT 'medium',
            progress INTEGER DEFAULT 0,
            start_date TIMESTAMP WITH TIME ZONE,
            end_date TIMESTAMP WITH TIME ZONE,
            tags JSONB DEFAULT '[]'::jsonb,
            notes TEXT,
            created_by VARCHAR NOT NULL,
            created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
            updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
            is_active BOOLEAN DEFAULT TRUE
        )
        """
    )
    await tenant_db.execute(
        "INSERT INTO {schema}.projects (title, client_name, end_date, created_by) "
        "VALUES ('Legacy', 'Ana', '2024-06-30T00:00:00Z', 'user-1')"
    )

    report = await get_projects_service().ensure_schema(tenant_db)

    assert report.ok
    rows = await tenant_db.execute(
        "SELECT start_date IS NOT NULL AS has_start, due_date = end_date AS due_from_end "
        "FROM {schema}.projects"
    )
    assert rows == [{"has_start": True, "due_from_end": True}]


async def test_unprovisioned_schema_raises_schema_not_found(engine):
    db = TenantDatabase("never-provisioned", engine=engine)

    with pytest.raises(SchemaNotFound):
        await db.execute("CREATE TABLE IF NOT EXISTS {schema}.marker (id INTEGER)")
