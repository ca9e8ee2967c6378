"""Database models.

Public schema holds the tenant directory. Tenant tables are owned by the
domain services and have no ORM models; they are reached through
TenantDatabase only.
"""

from src.lexoffice.models.enums import (
    ClientStatus,
    Currency,
    ProjectPriority,
    ProjectStatus,
    TaskPriority,
    TaskStatus,
)
from src.lexoffice.models.public import Tenant

__all__ = [
    "ClientStatus",
    "Currency",
    "ProjectPriority",
    "ProjectStatus",
    "TaskPriority",
    "TaskStatus",
    "Tenant",
]
