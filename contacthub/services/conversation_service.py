"""
Conversation service - 1:1 conversations, unread counters and per-participant flags.
"""

import logging
from typing import List, Optional, Sequence
import uuid

from contacthub.core.errors import ConstraintViolation, NotFound
from contacthub.database import as_utc, utcnow
from contacthub.models.message import (
    ContactConversation,
    ContactMessage,
    ConversationStatus,
    ConversationType,
)
from contacthub.repositories.store import ContactStore
from contacthub.schemas.common import Participant

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 200


class ConversationManager:
    def __init__(self, store: ContactStore):
        self.store = store

    async def find(self, user_a: str, user_b: str) -> Optional[ContactConversation]:
        """The conversation between two users, whichever of them started it."""
        low, high = sorted((user_a, user_b))
        rows = await self.store.conversations.list(pair_low_id=low, pair_high_id=high)
        return rows[0] if rows else None

    async def find_or_create(
        self,
        user_a: Participant,
        user_b: Participant,
        subject: Optional[str] = None
    ) -> ContactConversation:
        """
        Return the existing conversation for the pair or start a new one
        with user_a as participant1.
        """
        existing = await self.find(user_a.id, user_b.id)
        if existing:
            return existing

        low, high = sorted((user_a.id, user_b.id))
        record = ContactConversation(
            participant1_id=user_a.id,
            participant1_name=user_a.name,
            participant1_email=user_a.email,
            participant1_role=user_a.role,
            participant2_id=user_b.id,
            participant2_name=user_b.name,
            participant2_email=user_b.email,
            participant2_role=user_b.role,
            conversation_type=ConversationType.DIRECT_MESSAGE,
            subject=subject or "Direct Message",
            status=ConversationStatus.ACTIVE,
            last_message_at=utcnow(),
            unread_count1=0,
            unread_count2=0,
            is_archived1=False,
            is_archived2=False,
            is_blocked1=False,
            is_blocked2=False,
            pair_low_id=low,
            pair_high_id=high,
        )
        try:
            async with self.store.conversations.savepoint():
                conversation = await self.store.conversations.create(record)
        except ConstraintViolation:
            # Lost a race with a concurrent first message for the same pair
            existing = await self.find(user_a.id, user_b.id)
            if existing is None:
                raise
            return existing

        logger.info(f"Conversation {conversation.id} created: {user_a.id} <-> {user_b.id}")
        return conversation

    async def get(self, conversation_id: uuid.UUID, user_id: str) -> ContactConversation:
        conversation = await self.store.conversations.get(conversation_id)
        # Non-participants get the same answer as for a missing id
        if conversation is None or not conversation.has_participant(user_id):
            raise NotFound(f"Conversation {conversation_id} not found")
        return conversation

    async def append_message_effects(
        self,
        conversation_id: uuid.UUID,
        sender_is_participant1: bool,
        message: ContactMessage
    ) -> ContactConversation:
        """
        Refresh the last-message summary and bump the recipient's unread
        counter. The sender's counter is never touched.
        """
        conversation = await self._get(conversation_id)
        counter = "unread_count2" if sender_is_participant1 else "unread_count1"

        return await self.store.conversations.update(
            conversation_id,
            last_message_at=message.created_at or utcnow(),
            last_message_id=message.id,
            last_message_content=message.content[:PREVIEW_LENGTH],
            last_message_sender=message.sender_name,
            **{counter: getattr(conversation, counter) + 1}
        )

    async def list(self, user_id: str) -> List[ContactConversation]:
        """
        Conversations user_id takes part in and has not archived,
        most recent activity first.
        """
        as_first = await self.store.conversations.list(participant1_id=user_id, is_archived1=False)
        as_second = await self.store.conversations.list(participant2_id=user_id, is_archived2=False)

        conversations = {c.id: c for c in as_first + as_second}
        return sorted(
            conversations.values(),
            key=lambda c: as_utc(c.last_message_at or c.created_at),
            reverse=True
        )

    async def archive(self, user_id: str, conversation_id: uuid.UUID) -> ContactConversation:
        return await self._set_flag(user_id, conversation_id, "is_archived", True)

    async def unarchive(self, user_id: str, conversation_id: uuid.UUID) -> ContactConversation:
        return await self._set_flag(user_id, conversation_id, "is_archived", False)

    async def set_blocked(self, user_id: str, conversation_id: uuid.UUID, blocked: bool) -> ContactConversation:
        return await self._set_flag(user_id, conversation_id, "is_blocked", blocked)

    async def decrement_unread(self, conversation_id: uuid.UUID, reader_id: str) -> ContactConversation:
        conversation = await self._get(conversation_id)
        counter = f"unread_count{conversation.slot(reader_id)}"
        current = getattr(conversation, counter)
        if current <= 0:
            return conversation
        return await self.store.conversations.update(conversation_id, **{counter: current - 1})

    async def reset_unread(self, conversation_id: uuid.UUID, reader_id: str) -> ContactConversation:
        conversation = await self._get(conversation_id)
        counter = f"unread_count{conversation.slot(reader_id)}"
        if getattr(conversation, counter) == 0:
            return conversation
        return await self.store.conversations.update(conversation_id, **{counter: 0})

    async def reconcile(
        self,
        conversation_id: uuid.UUID,
        messages: Optional[Sequence[ContactMessage]] = None
    ) -> ContactConversation:
        """
        Rebuild the last-message summary and both unread counters from the
        stored messages (or the given ones).

        Repairs conversations left stale when a send was interrupted between
        storing the message and applying its effects.
        """
        conversation = await self._get(conversation_id)
        if messages is None:
            messages = await self.store.messages.list(conversation_id=conversation_id)

        ordered = sorted(messages, key=lambda m: as_utc(m.created_at))
        unread = [m for m in ordered if not m.is_read]

        changes = {
            "unread_count1": sum(1 for m in unread if m.recipient_id == conversation.participant1_id),
            "unread_count2": sum(1 for m in unread if m.recipient_id == conversation.participant2_id),
        }
        if ordered:
            last = ordered[-1]
            changes.update(
                last_message_at=last.created_at,
                last_message_id=last.id,
                last_message_content=last.content[:PREVIEW_LENGTH],
                last_message_sender=last.sender_name,
            )

        logger.info(f"Conversation {conversation_id} reconciled from {len(ordered)} messages")
        return await self.store.conversations.update(conversation_id, **changes)

    async def _set_flag(self, user_id: str, conversation_id: uuid.UUID, flag: str, value: bool) -> ContactConversation:
        conversation = await self.get(conversation_id, user_id)
        column = f"{flag}{conversation.slot(user_id)}"
        if getattr(conversation, column) == value:
            return conversation

        logger.info(f"Conversation {conversation_id}: {column}={value} for {user_id}")
        return await self.store.conversations.update(conversation_id, **{column: value})

    async def _get(self, conversation_id: uuid.UUID) -> ContactConversation:
        conversation = await self.store.conversations.get(conversation_id)
        if conversation is None:
            raise NotFound(f"Conversation {conversation_id} not found")
        return conversation
