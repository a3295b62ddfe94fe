"""
Chat service - direct messages between two users.
"""

import logging
from typing import List
import uuid

from contacthub.core.errors import DirectMessagesDisabled, NotFound, PermissionDenied, SenderBlocked
from contacthub.database import as_utc, utcnow
from contacthub.models.message import ContactMessage
from contacthub.models.notification import NotificationType
from contacthub.repositories.store import ContactStore
from contacthub.schemas.message import MessageCreate
from contacthub.services.conversation_service import ConversationManager
from contacthub.services.notification_service import NotificationDispatcher
from contacthub.services.settings_service import ContactSettingsStore

logger = logging.getLogger(__name__)


class MessageManager:
    def __init__(
        self,
        store: ContactStore,
        settings: ContactSettingsStore,
        conversations: ConversationManager,
        notifier: NotificationDispatcher
    ):
        self.store = store
        self.settings = settings
        self.conversations = conversations
        self.notifier = notifier

    async def send(self, message: MessageCreate) -> ContactMessage:
        """
        Send a direct message, creating the conversation on first contact.

        All permission checks run before anything is written, so a rejected
        send leaves no conversation or message behind.
        """
        sender, recipient = message.sender, message.recipient
        if sender.id == recipient.id:
            raise PermissionDenied("Cannot send a message to yourself")

        recipient_settings = await self.settings.effective(recipient.id)

        if not recipient_settings.allow_direct_messages:
            raise DirectMessagesDisabled("Recipient does not accept direct messages")

        if sender.id in (recipient_settings.blocked_users or []):
            raise SenderBlocked("You are blocked by this user")

        conversation = await self.conversations.find_or_create(sender, recipient, message.subject)

        stored = await self.store.messages.create(
            ContactMessage(
                conversation_id=conversation.id,
                sender_id=sender.id,
                sender_name=sender.name,
                sender_email=sender.email,
                sender_role=sender.role,
                recipient_id=recipient.id,
                recipient_name=recipient.name,
                recipient_email=recipient.email,
                recipient_role=recipient.role,
                message_type=message.message_type,
                subject=message.subject,
                content=message.content,
                attachments=message.attachments,
                is_read=False,
                read_at=None,
                is_encrypted=message.is_encrypted,
                priority=message.priority,
                category=message.category,
                tags=message.tags,
                extra_data=message.extra_data,
            )
        )

        await self.conversations.append_message_effects(
            conversation.id,
            sender_is_participant1=conversation.participant1_id == sender.id,
            message=stored
        )
        logger.info(f"Message {stored.id} sent in conversation {conversation.id}")

        preview = message.content if len(message.content) <= 100 else message.content[:100] + "..."
        await self.notifier.notify(
            user_id=recipient.id,
            user_name=recipient.name,
            user_email=recipient.email,
            notification_type=NotificationType.NEW_MESSAGE,
            title=f"New message from {sender.name}",
            message=preview,
            related_id=str(conversation.id),
            related_type="conversation",
            priority=message.priority,
            category=message.category,
            action_required=False,
            action_url=f"/contacts/conversations/{conversation.id}",
            extra_data={"message_id": str(stored.id), "sender_id": sender.id},
        )

        return stored

    async def mark_read(self, message_id: uuid.UUID) -> ContactMessage:
        """
        Mark a message read. Repeated calls keep the first read_at.

        The first transition also takes one off the recipient's unread
        counter for the conversation.
        """
        message = await self.store.messages.get(message_id)
        if message is None:
            raise NotFound(f"Message {message_id} not found")
        if message.is_read:
            return message

        message = await self.store.messages.update(message_id, is_read=True, read_at=utcnow())
        await self.conversations.decrement_unread(message.conversation_id, message.recipient_id)
        return message

    async def mark_conversation_read(self, conversation_id: uuid.UUID, reader_id: str) -> int:
        await self.conversations.get(conversation_id, reader_id)

        unread = await self.store.messages.list(
            conversation_id=conversation_id,
            recipient_id=reader_id,
            is_read=False
        )
        now = utcnow()
        for message in unread:
            await self.store.messages.update(message.id, is_read=True, read_at=now)

        await self.conversations.reset_unread(conversation_id, reader_id)
        return len(unread)

    async def list(self, conversation_id: uuid.UUID) -> List[ContactMessage]:
        """Oldest first."""
        messages = await self.store.messages.list(conversation_id=conversation_id)
        return sorted(messages, key=lambda m: as_utc(m.created_at))
