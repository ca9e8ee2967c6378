"""Tests for task payloads, project linking and task stats."""

from datetime import date
from decimal import Decimal

import pytest

from src.lexoffice.schemas import ListFilters, TaskCreate
from src.lexoffice.services import get_tasks_service
from src.lexoffice.services.tasks import STATS_SQL, parse_task_stats
from tests.fakes import FakeTenantDatabase, echo_writes

pytestmark = pytest.mark.unit

TASK = {"title": "Protocolar requerimento", "assignedTo": "user-7"}


class TestPayload:
    def test_defaults(self):
        task = TaskCreate.model_validate(TASK)

        assert task.status == "not_started"
        assert task.priority == "medium"
        assert task.progress == 0
        assert task.subtasks == []

    @pytest.mark.parametrize("project_id", ["none", "", "  "])
    def test_no_project_sentinel_means_unlinked(self, project_id: str):
        assert TaskCreate.model_validate({**TASK, "projectId": project_id}).project_id is None

    def test_project_id_kept_verbatim(self):
        task = TaskCreate.model_validate({**TASK, "projectId": "8a6e0804"})

        assert task.project_id == "8a6e0804"

    def test_dates_and_hours(self):
        task = TaskCreate.model_validate(
            {**TASK, "startDate": "2025-05-01", "endDate": "2025-05-03", "estimatedHours": "2.5"}
        )

        assert task.start_date == date(2025, 5, 1)
        assert task.end_date == date(2025, 5, 3)
        assert task.estimated_hours == Decimal("2.5")

    @pytest.mark.parametrize(
        "overrides",
        [
            {"assignedTo": ""},
            {"assignedTo": "   "},
            {"title": "   "},
            {"status": "done"},
            {"priority": "critical"},
            {"progress": 150},
        ],
    )
    def test_invalid_values_rejected(self, overrides):
        with pytest.raises(ValueError):
            TaskCreate.model_validate({**TASK, **overrides})


async def test_create_unlinked_task_leaves_project_null():
    db = FakeTenantDatabase(echo_writes)

    row = await get_tasks_service().create(
        db, {**TASK, "projectId": "none", "subtasks": [{"title": "a"}]}, created_by="user-1"
    )

    sql, params = db.last("INSERT")
    assert "v_project_id" not in params
    assert "CAST(:v_subtasks AS JSONB)" in sql
    assert row["assigned_to"] == "user-7"
    assert row["subtasks"] == [{"title": "a"}]


async def test_list_filters_by_assignee_and_project():
    db = FakeTenantDatabase()

    await get_tasks_service().list(db, ListFilters(assigned_to="user-7", project_id="p-1"))

    sql, params = db.last("SELECT COUNT(*)")
    assert "assigned_to = :assigned_to AND project_id = :project_id" in sql
    assert params == {"assigned_to": "user-7", "project_id": "p-1"}


def test_overdue_counts_open_tasks_only():
    assert "end_date < CURRENT_DATE AND status NOT IN ('completed', 'cancelled')" in STATS_SQL


def test_stats_parsed_from_row():
    stats = parse_task_stats(
        {
            "total": 9,
            "completed": 3,
            "in_progress": 2,
            "not_started": 2,
            "on_hold": 1,
            "urgent": 1,
            "overdue": 4,
        }
    )

    assert stats.model_dump(by_alias=True) == {
        "total": 9,
        "completed": 3,
        "inProgress": 2,
        "notStarted": 2,
        "onHold": 1,
        "urgent": 1,
        "overdue": 4,
    }


def test_stats_missing_counters_default_to_zero():
    assert parse_task_stats({"total": None}).model_dump() == {
        "total": 0,
        "completed": 0,
        "in_progress": 0,
        "not_started": 0,
        "on_hold": 0,
        "urgent": 0,
        "overdue": 0,
    }
