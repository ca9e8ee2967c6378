from fastapi import APIRouter

from src.lexoffice.api.v1 import clients, projects, tasks

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(clients.router)
api_router.include_router(projects.router)
api_router.include_router(tasks.router)
