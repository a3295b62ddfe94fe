from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from contacthub.models import (
    ContactConversation,
    ContactMessage,
    ContactNotification,
    ContactRequest,
    ContactSettings,
)
from contacthub.repositories.base import Repository
from contacthub.repositories.memory import InMemoryRepository
from contacthub.repositories.sqlalchemy_repository import SQLAlchemyRepository


@dataclass
class ContactStore:
    """The five repositories the contact services work against."""

    settings: Repository[ContactSettings]
    requests: Repository[ContactRequest]
    conversations: Repository[ContactConversation]
    messages: Repository[ContactMessage]
    notifications: Repository[ContactNotification]
    # Transactional stores only: callbacks held until the session commits
    after_commit: Optional[List[Callable[[], Awaitable[None]]]] = None

    @classmethod
    def from_session(cls, db: AsyncSession) -> "ContactStore":
        return cls(
            settings=SQLAlchemyRepository(db, ContactSettings),
            requests=SQLAlchemyRepository(db, ContactRequest),
            conversations=SQLAlchemyRepository(db, ContactConversation),
            messages=SQLAlchemyRepository(db, ContactMessage),
            notifications=SQLAlchemyRepository(db, ContactNotification),
            after_commit=[],
        )

    @classmethod
    def in_memory(cls) -> "ContactStore":
        return cls(
            settings=InMemoryRepository(ContactSettings),
            requests=InMemoryRepository(ContactRequest),
            conversations=InMemoryRepository(ContactConversation),
            messages=InMemoryRepository(ContactMessage),
            notifications=InMemoryRepository(ContactNotification),
        )

    def on_commit(self, callback: Callable[[], Awaitable[None]]) -> bool:
        """
        Queue callback until ``run_after_commit``. Returns False when the
        store has no transaction to wait for and the caller should run it now.
        """
        if self.after_commit is None:
            return False
        self.after_commit.append(callback)
        return True

    async def run_after_commit(self) -> None:
        if not self.after_commit:
            return
        callbacks, self.after_commit = self.after_commit, []
        for callback in callbacks:
            await callback()
