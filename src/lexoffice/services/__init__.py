from src.lexoffice.services.clients import CLIENT_DEFINITION, get_clients_service
from src.lexoffice.services.entity_service import EntityDefinition, TenantEntityService
from src.lexoffice.services.projects import PROJECT_DEFINITION, get_projects_service
from src.lexoffice.services.tasks import TASK_DEFINITION, get_tasks_service

__all__ = [
    "CLIENT_DEFINITION",
    "PROJECT_DEFINITION",
    "TASK_DEFINITION",
    "EntityDefinition",
    "TenantEntityService",
    "get_clients_service",
    "get_projects_service",
    "get_tasks_service",
]
