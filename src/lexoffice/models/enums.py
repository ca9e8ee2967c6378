"""Enumerated value sets for tenant entities.

Stored as plain strings. Status transitions are unconstrained: any state may
be reached from any other state through an update.
"""

from enum import Enum


class Currency(str, Enum):
    BRL = "BRL"
    USD = "USD"
    EUR = "EUR"


class ClientStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


class ProjectStatus(str, Enum):
    """Pipeline stage of a case/deal."""

    CONTACTED = "contacted"
    PROPOSAL = "proposal"
    WON = "won"
    LOST = "lost"


class ProjectPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"
    CANCELLED = "cancelled"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

