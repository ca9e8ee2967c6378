from src.lexoffice.schemas.client import ClientCreate, ClientRead, ClientStats, ClientUpdate
from src.lexoffice.schemas.common import ListFilters, PaginatedResponse, Pagination
from src.lexoffice.schemas.project import (
    ProjectCreate,
    ProjectRead,
    ProjectStats,
    ProjectUpdate,
)
from src.lexoffice.schemas.task import TaskCreate, TaskRead, TaskStats, TaskUpdate

__all__ = [
    "ClientCreate",
    "ClientRead",
    "ClientStats",
    "ClientUpdate",
    "ListFilters",
    "PaginatedResponse",
    "Pagination",
    "ProjectCreate",
    "ProjectRead",
    "ProjectStats",
    "ProjectUpdate",
    "TaskCreate",
    "TaskRead",
    "TaskStats",
    "TaskUpdate",
]
