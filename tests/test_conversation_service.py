"""Tests for ConversationManager: pair lookup, counters and per-participant flags."""

from datetime import timedelta
import uuid

import pytest

from contacthub.core.errors import ConstraintViolation, NotFound
from contacthub.database import utcnow
from contacthub.models.message import ContactMessage, ConversationStatus, ConversationType
from contacthub.services.conversation_service import ConversationManager
from tests.helpers import INVESTOR, MENTOR, STUDENT


@pytest.fixture
def conversations(store) -> ConversationManager:
    return ConversationManager(store)


async def add_message(store, conversation, sender, recipient, content="hi", is_read=False, created_at=None):
    return await store.messages.create(
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
            content=content,
            is_read=is_read,
            created_at=created_at,
        )
    )


@pytest.mark.asyncio
async def test_find_or_create_is_order_independent(conversations, store):
    first = await conversations.find_or_create(MENTOR, STUDENT)
    second = await conversations.find_or_create(STUDENT, MENTOR)
    third = await conversations.find_or_create(MENTOR, STUDENT, "Follow-up")

    assert first.id == second.id == third.id
    assert (first.pair_low_id, first.pair_high_id) == tuple(sorted((MENTOR.id, STUDENT.id)))
    assert len(await store.conversations.list()) == 1


@pytest.mark.asyncio
async def test_new_conversation_defaults(conversations):
    conversation = await conversations.find_or_create(MENTOR, STUDENT, "Pitch review")

    assert conversation.conversation_type == ConversationType.DIRECT_MESSAGE
    assert conversation.status == ConversationStatus.ACTIVE
    assert conversation.subject == "Pitch review"
    assert conversation.participant1_id == MENTOR.id
    assert conversation.participant2_id == STUDENT.id
    assert (conversation.unread_count1, conversation.unread_count2) == (0, 0)
    assert not (conversation.is_archived1 or conversation.is_archived2)
    assert not (conversation.is_blocked1 or conversation.is_blocked2)


@pytest.mark.asyncio
async def test_default_subject(conversations):
    conversation = await conversations.find_or_create(MENTOR, STUDENT)

    assert conversation.subject == "Direct Message"


@pytest.mark.asyncio
async def test_get_hides_conversation_from_outsiders(conversations):
    conversation = await conversations.find_or_create(MENTOR, STUDENT)

    assert (await conversations.get(conversation.id, STUDENT.id)).id == conversation.id
    with pytest.raises(NotFound):
        await conversations.get(conversation.id, INVESTOR.id)
    with pytest.raises(NotFound):
        await conversations.get(uuid.uuid4(), MENTOR.id)


@pytest.mark.asyncio
async def test_append_effects_bump_only_recipient(conversations, store):
    conversation = await conversations.find_or_create(MENTOR, STUDENT)
    message = await add_message(store, conversation, MENTOR, STUDENT, content="Welcome aboard")

    updated = await conversations.append_message_effects(conversation.id, True, message)

    assert updated.unread_count_for(STUDENT.id) == 1
    assert updated.unread_count_for(MENTOR.id) == 0
    assert updated.last_message_id == message.id
    assert updated.last_message_content == "Welcome aboard"
    assert updated.last_message_sender == MENTOR.name

    reply = await add_message(store, conversation, STUDENT, MENTOR)
    updated = await conversations.append_message_effects(conversation.id, False, reply)

    assert updated.unread_count_for(MENTOR.id) == 1
    assert updated.unread_count_for(STUDENT.id) == 1


@pytest.mark.asyncio
async def test_list_excludes_own_archived_and_sorts_by_activity(conversations, store):
    with_student = await conversations.find_or_create(MENTOR, STUDENT)
    with_investor = await conversations.find_or_create(INVESTOR, MENTOR)

    await store.conversations.update(with_student.id, last_message_at=utcnow() - timedelta(hours=1))
    await store.conversations.update(with_investor.id, last_message_at=utcnow())

    listed = await conversations.list(MENTOR.id)
    assert [c.id for c in listed] == [with_investor.id, with_student.id]

    await conversations.archive(MENTOR.id, with_investor.id)

    assert [c.id for c in await conversations.list(MENTOR.id)] == [with_student.id]
    # Archiving is per participant
    assert [c.id for c in await conversations.list(INVESTOR.id)] == [with_investor.id]

    await conversations.unarchive(MENTOR.id, with_investor.id)
    assert len(await conversations.list(MENTOR.id)) == 2


@pytest.mark.asyncio
async def test_archive_requires_participant(conversations):
    conversation = await conversations.find_or_create(MENTOR, STUDENT)

    with pytest.raises(NotFound):
        await conversations.archive(INVESTOR.id, conversation.id)


@pytest.mark.asyncio
async def test_set_blocked_only_touches_callers_flag(conversations):
    conversation = await conversations.find_or_create(MENTOR, STUDENT)

    updated = await conversations.set_blocked(STUDENT.id, conversation.id, True)

    assert updated.is_blocked2 is True
    assert updated.is_blocked1 is False


@pytest.mark.asyncio
async def test_decrement_unread_floors_at_zero(conversations, store):
    conversation = await conversations.find_or_create(MENTOR, STUDENT)
    await store.conversations.update(conversation.id, unread_count2=1)

    await conversations.decrement_unread(conversation.id, STUDENT.id)
    updated = await conversations.decrement_unread(conversation.id, STUDENT.id)

    assert updated.unread_count2 == 0


@pytest.mark.asyncio
async def test_reconcile_rebuilds_summary_and_counters(conversations, store):
    conversation = await conversations.find_or_create(MENTOR, STUDENT)
    now = utcnow()
    await add_message(store, conversation, MENTOR, STUDENT, "one", created_at=now - timedelta(minutes=3))
    await add_message(store, conversation, MENTOR, STUDENT, "two", is_read=True, created_at=now - timedelta(minutes=2))
    last = await add_message(store, conversation, STUDENT, MENTOR, "three", created_at=now - timedelta(minutes=1))

    # Stale summary, as left by an interrupted send
    await store.conversations.update(conversation.id, unread_count1=7, unread_count2=0, last_message_content="old")

    repaired = await conversations.reconcile(conversation.id)

    assert repaired.unread_count_for(MENTOR.id) == 1
    assert repaired.unread_count_for(STUDENT.id) == 1
    assert repaired.last_message_id == last.id
    assert repaired.last_message_content == "three"
    assert repaired.last_message_sender == STUDENT.name


@pytest.mark.asyncio
async def test_find_or_create_reraises_constraint_error_without_a_winner(conversations, store, monkeypatch):
    async def rejected_create(entity):
        raise ConstraintViolation("ContactConversation rejected by a database constraint")

    monkeypatch.setattr(store.conversations, "create", rejected_create)

    with pytest.raises(ConstraintViolation):
        await conversations.find_or_create(MENTOR, STUDENT)
