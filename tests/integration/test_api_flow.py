"""HTTP flows through the real application and database."""

import pytest
from httpx import AsyncClient

from src.lexoffice.core.security import create_access_token
from src.lexoffice.models.public import Tenant

pytestmark = pytest.mark.integration


def _auth(tenant_id: str | None, subject: str = "user-1") -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(subject, tenant_id)}"}


async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "healthy"}


async def test_client_crud_over_http(client: AsyncClient, tenant: Tenant):
    headers = _auth(tenant.id)

    created = await client.post(
        "/api/v1/clients",
        json={"name": "Ana Souza", "email": "ana@example.com", "city": "Recife"},
        headers=headers,
    )
    assert created.status_code == 201
    client_id = created.json()["id"]
    assert created.json()["created_by"] == "user-1"
    assert created.json()["address"]["city"] == "Recife"

    patched = await client.patch(
        f"/api/v1/clients/{client_id}", json={"status": "pending"}, headers=headers
    )
    assert patched.status_code == 200
    assert patched.json()["status"] == "pending"

    listed = await client.get("/api/v1/clients", params={"status": "pending"}, headers=headers)
    assert listed.status_code == 200
    assert [item["id"] for item in listed.json()["items"]] == [client_id]
    assert listed.json()["pagination"]["totalPages"] == 1

    stats = await client.get("/api/v1/clients/stats", headers=headers)
    assert stats.json()["pending"] == 1
    assert stats.json()["thisMonth"] == 1

    deleted = await client.delete(f"/api/v1/clients/{client_id}", headers=headers)
    assert deleted.status_code == 204

    missing = await client.get(f"/api/v1/clients/{client_id}", headers=headers)
    assert missing.status_code == 404


async def test_project_and_task_flow(client: AsyncClient, tenant: Tenant):
    headers = _auth(tenant.id)

    project = await client.post(
        "/api/v1/projects",
        json={
            "title": "Aposentadoria",
            "clientName": "Ana Souza",
            "startDate": "2025-01-10",
            "dueDate": "2025-03-10",
            "budget": 2500,
            "status": "won",
        },
        headers=headers,
    )
    assert project.status_code == 201
    project_id = project.json()["id"]

    task = await client.post(
        "/api/v1/tasks",
        json={"title": "Protocolar", "assignedTo": "user-7", "projectId": project_id},
        headers=headers,
    )
    assert task.status_code == 201

    tasks = await client.get(
        "/api/v1/tasks",
        params={"projectId": project_id, "assignedTo": "user-7"},
        headers=headers,
    )
    assert [item["title"] for item in tasks.json()["items"]] == ["Protocolar"]

    stats = await client.get("/api/v1/projects/stats", headers=headers)
    assert stats.json()["total"] == 1
    assert stats.json()["revenue"] == 2500
    assert stats.json()["byStatus"]["won"] == 1


async def test_other_tenant_cannot_see_records(
    client: AsyncClient, tenant: Tenant, other_tenant: Tenant
):
    created = await client.post(
        "/api/v1/tasks",
        json={"title": "Protocolar", "assignedTo": "user-7"},
        headers=_auth(tenant.id),
    )
    task_id = created.json()["id"]

    response = await client.get(f"/api/v1/tasks/{task_id}", headers=_auth(other_tenant.id))

    assert response.status_code == 404


async def test_unknown_tenant_is_denied(client: AsyncClient, engine):
    response = await client.get("/api/v1/clients", headers=_auth("no-such-tenant"))

    assert response.status_code == 403
    assert response.json()["detail"] == "Access denied: Tenant not found"
