"""Generic async repository over one mapped model."""

import uuid
from typing import Generic, TypeVar, Type, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.base import Base

T = TypeVar('T', bound=Base)
EntityId = uuid.UUID | int


class BaseRepository(Generic[T]):
    """
    CRUD helpers shared by the concrete repositories.

    Repositories flush but never commit; the use case owning the session
    decides when the unit of work ends.
    """

    def __init__(self, model: Type[T], session: AsyncSession):
        self.model = model
        self.session = session

    async def get_by_id(self, id: EntityId) -> Optional[T]:
        return await self.session.get(self.model, id)

    async def create(self, entity: T) -> T:
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def update(self, entity: T) -> T:
        await self.session.flush()
        return entity
