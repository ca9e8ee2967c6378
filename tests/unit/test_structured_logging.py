"""Tests for structured logging context."""

import pytest
import structlog
from fastapi.testclient import TestClient

from src.lexoffice.api.dependencies import CurrentPrincipal, get_tenant_database
from src.lexoffice.core.logging import (
    bind_request_context,
    bind_tenant_context,
    bind_user_context,
    clear_request_context,
    redact_sensitive,
)
from src.lexoffice.core.security import create_access_token
from src.lexoffice.main import create_app
from tests.fakes import FakeTenantDatabase, echo_writes

pytestmark = pytest.mark.unit


def test_bind_request_context(capturing_logger):
    """Test binding request_id to log context."""
    bind_request_context("test-request-123")
    structlog.get_logger().info("test message")

    entries = capturing_logger.calls
    assert len(entries) == 1
    assert entries[0].kwargs["request_id"] == "test-request-123"


def test_bind_request_context_with_none(capturing_logger):
    """Test that None request_id is not bound."""
    bind_request_context(None)
    structlog.get_logger().info("test message")

    assert "request_id" not in capturing_logger.calls[0].kwargs


def test_bind_user_context(capturing_logger):
    """Test binding user, tenant and role to logs."""
    bind_user_context("user-1", "acme-corp", "admin")
    structlog.get_logger().info("test message")

    kwargs = capturing_logger.calls[0].kwargs
    assert kwargs["user_id"] == "user-1"
    assert kwargs["tenant_id"] == "acme-corp"
    assert kwargs["role"] == "admin"


def test_bind_user_context_without_tenant(capturing_logger):
    """Test that a principal without tenant does not bind tenant_id."""
    bind_user_context("user-1", None)
    structlog.get_logger().info("test message")

    kwargs = capturing_logger.calls[0].kwargs
    assert kwargs["user_id"] == "user-1"
    assert "tenant_id" not in kwargs
    assert "role" not in kwargs


def test_bind_tenant_context(capturing_logger):
    """Test binding the resolved schema once tenant access is granted."""
    bind_tenant_context("acme-corp", "tenant_acmecorp")
    structlog.get_logger().info("test message")

    kwargs = capturing_logger.calls[0].kwargs
    assert kwargs["tenant_id"] == "acme-corp"
    assert kwargs["schema"] == "tenant_acmecorp"


def test_clear_request_context(capturing_logger):
    """Test clearing request context."""
    bind_request_context("test-request-123")
    bind_user_context("user-1", "acme-corp")
    bind_tenant_context("acme-corp", "tenant_acmecorp")

    clear_request_context()
    structlog.get_logger().info("test message")

    kwargs = capturing_logger.calls[0].kwargs
    for key in ("request_id", "user_id", "tenant_id", "schema"):
        assert key not in kwargs


def test_request_logs_carry_request_and_user_context(capturing_logger):
    """Test that service logs emitted during a request include its context."""
    app = create_app()
    db = FakeTenantDatabase(echo_writes)

    async def override(principal: CurrentPrincipal):
        yield db

    app.dependency_overrides[get_tenant_database] = override
    token = create_access_token("user-1", "acme-corp")

    response = TestClient(app).post(
        "/api/v1/tasks",
        json={"title": "Protocolar", "assignedTo": "user-7"},
        headers={"Authorization": f"Bearer {token}", "X-Request-ID": "a" * 32},
    )

    assert response.status_code == 201
    created = [c for c in capturing_logger.calls if c.kwargs.get("event") == "Record created"]
    assert len(created) == 1
    assert created[0].kwargs["request_id"] == "a" * 32
    assert created[0].kwargs["user_id"] == "user-1"
    assert created[0].kwargs["tenant_id"] == "acme-corp"
    assert created[0].kwargs["entity"] == "Task"


def test_sensitive_values_are_redacted():
    event = {"event": "Query failed", "params": {"email": "a@b.c"}, "param_names": ["email"]}

    redacted = redact_sensitive(None, "error", event)

    assert redacted["params"] == "[redacted]"
    assert redacted["param_names"] == ["email"]
