"""
Persistence port for the contact services.

Every entity is reached through the same four operations, so the services
can run against PostgreSQL, SQLite or a plain in-process store.
"""

from typing import Any, AsyncContextManager, List, Optional, Protocol, TypeVar, runtime_checkable
import uuid

ModelT = TypeVar("ModelT")


@runtime_checkable
class Repository(Protocol[ModelT]):
    """
    create/get/update/list for one entity type.

    ``list`` takes equality filters only (``list(user_id="u1", is_read=False)``);
    ordering and richer filtering happen in the services.
    """

    async def create(self, entity: ModelT) -> ModelT:
        """Persist a new entity; id and timestamps are assigned if unset."""

    async def get(self, entity_id: uuid.UUID) -> Optional[ModelT]:
        """Fetch by primary key, None if absent."""

    async def update(self, entity_id: uuid.UUID, **changes: Any) -> ModelT:
        """Apply ``changes`` and bump ``updated_at``. Raises NotFound if absent."""

    async def list(self, **filters: Any) -> List[ModelT]:
        """All entities whose attributes equal every given filter."""

    def savepoint(self) -> AsyncContextManager[None]:
        """
        Scope whose writes are undone if it raises, leaving the enclosing
        unit of work usable.
        """
