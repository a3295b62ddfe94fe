"""
Contact service - composes the contact managers for the API layer.
"""

import logging
from typing import Optional

from contacthub.models.contact_settings import ContactSettings
from contacthub.repositories.store import ContactStore
from contacthub.services.chat_service import MessageManager
from contacthub.services.conversation_service import ConversationManager
from contacthub.services.notification_service import NotificationDispatcher, Publisher
from contacthub.services.request_service import ContactRequestManager
from contacthub.services.settings_service import ContactSettingsStore

logger = logging.getLogger(__name__)


class ContactService:
    """
    One instance per request, wired to that request's store.

    Usage:
        service = ContactService(ContactStore.from_session(db))
        await service.requests.send(request)
    """

    def __init__(self, store: ContactStore, publisher: Optional[Publisher] = None):
        self.store = store
        self.notifications = NotificationDispatcher(store, publisher)
        self.settings = ContactSettingsStore(store)
        self.conversations = ConversationManager(store)
        self.requests = ContactRequestManager(store, self.settings, self.notifications)
        self.messages = MessageManager(store, self.settings, self.conversations, self.notifications)

    async def block_user(self, user_id: str, target_id: str) -> ContactSettings:
        """
        Block target_id and flag user_id's side of their conversation, if any.
        """
        settings = await self.settings.block(user_id, target_id)

        conversation = await self.conversations.find(user_id, target_id)
        if conversation:
            await self.conversations.set_blocked(user_id, conversation.id, True)

        return settings

    async def unblock_user(self, user_id: str, target_id: str) -> ContactSettings:
        settings = await self.settings.unblock(user_id, target_id)

        conversation = await self.conversations.find(user_id, target_id)
        if conversation:
            await self.conversations.set_blocked(user_id, conversation.id, False)

        return settings
