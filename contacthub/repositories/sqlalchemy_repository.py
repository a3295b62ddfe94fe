"""
Async SQLAlchemy adapter for the persistence port.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Generic, List, Optional, Type
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from contacthub.core.errors import ConstraintViolation, NotFound
from contacthub.database import utcnow
from contacthub.repositories.base import ModelT


class SQLAlchemyRepository(Generic[ModelT]):
    """
    Repository over a request-scoped AsyncSession.

    Writes are flushed, not committed: the session owner commits once the
    whole request succeeded (see ``session_scope``).
    """

    def __init__(self, db: AsyncSession, model: Type[ModelT]):
        self.db = db
        self.model = model

    async def create(self, entity: ModelT) -> ModelT:
        self.db.add(entity)
        try:
            await self.db.flush()
        except IntegrityError as e:
            raise ConstraintViolation(f"{self.model.__name__} rejected by a database constraint") from e
        return entity

    async def get(self, entity_id: uuid.UUID) -> Optional[ModelT]:
        return await self.db.get(self.model, entity_id)

    async def update(self, entity_id: uuid.UUID, **changes: Any) -> ModelT:
        entity = await self.get(entity_id)
        if entity is None:
            raise NotFound(f"{self.model.__name__} {entity_id} not found")

        for field, value in changes.items():
            setattr(entity, field, value)
        entity.updated_at = utcnow()

        await self.db.flush()
        return entity

    async def list(self, **filters: Any) -> List[ModelT]:
        result = await self.db.execute(
            select(self.model).filter_by(**filters)
        )
        return list(result.scalars().all())

    @asynccontextmanager
    async def savepoint(self) -> AsyncIterator[None]:
        # SAVEPOINT; a failed flush inside rolls back to here, not the whole session
        async with self.db.begin_nested():
            yield
