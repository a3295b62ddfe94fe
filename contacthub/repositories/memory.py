"""
In-process adapter for the persistence port (tests, local demos).
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Generic, List, Optional, Type
import uuid

from contacthub.core.errors import NotFound
from contacthub.database import utcnow
from contacthub.repositories.base import ModelT


class InMemoryRepository(Generic[ModelT]):
    """
    Dict-backed repository holding model instances that are never attached
    to a session. Not shared across processes.
    """

    def __init__(self, model: Type[ModelT]):
        self.model = model
        self.rows: Dict[uuid.UUID, ModelT] = {}

    async def create(self, entity: ModelT) -> ModelT:
        if entity.id is None:
            entity.id = uuid.uuid4()
        now = utcnow()
        # Callers may backdate records (fixtures, imports)
        if entity.created_at is None:
            entity.created_at = now
        if entity.updated_at is None:
            entity.updated_at = entity.created_at
        self.rows[entity.id] = entity
        return entity

    async def get(self, entity_id: uuid.UUID) -> Optional[ModelT]:
        return self.rows.get(entity_id)

    async def update(self, entity_id: uuid.UUID, **changes: Any) -> ModelT:
        entity = self.rows.get(entity_id)
        if entity is None:
            raise NotFound(f"{self.model.__name__} {entity_id} not found")

        for field, value in changes.items():
            setattr(entity, field, value)
        entity.updated_at = utcnow()
        return entity

    async def list(self, **filters: Any) -> List[ModelT]:
        return [
            row for row in self.rows.values()
            if all(getattr(row, field) == value for field, value in filters.items())
        ]

    @asynccontextmanager
    async def savepoint(self) -> AsyncIterator[None]:
        # Writes land one at a time, so there is nothing partial to undo
        yield
