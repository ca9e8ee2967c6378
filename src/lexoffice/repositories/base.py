"""Repositories over public-schema SQLModel tables."""

from typing import Any, Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Primary-key access for one model. Callers own the transaction."""

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: Any) -> ModelType | None:
        return await self.session.get(self.model, id)

    def add(self, entity: ModelType) -> None:
        """Stage ``entity``; nothing is flushed until the caller commits."""
        self.session.add(entity)
