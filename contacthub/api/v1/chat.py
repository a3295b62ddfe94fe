"""
Messaging API - direct conversations and messages.

Sending goes through REST; recipients learn about new messages through the
notification socket (see notifications.py).
"""

from fastapi import APIRouter, Depends, status
from typing import List
import uuid

from contacthub.core.dependencies import CurrentUser, get_contact_service, get_current_user
from contacthub.core.errors import NotFound
from contacthub.schemas.message import (
    ConversationCreate,
    ConversationResponse,
    MarkConversationReadResponse,
    MessageBody,
    MessageCreate,
    MessageListResponse,
    MessageResponse,
)
from contacthub.services.contact_service import ContactService

router = APIRouter(
    prefix="/messages",
    tags=["Messaging"]
)

# ============================================
# CONVERSATION ENDPOINTS
# ============================================

@router.get(
    "/conversations",
    response_model=List[ConversationResponse],
    summary="List my conversations",
    description="Conversations you have not archived, most recent activity first."
)
async def list_conversations(
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    return await service.conversations.list(current_user.id)


@router.post(
    "/conversations",
    response_model=ConversationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a 1-on-1 conversation",
    description="Returns the existing conversation if one already exists between the two users."
)
async def create_conversation(
    data: ConversationCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    return await service.conversations.find_or_create(
        current_user.as_participant(),
        data.participant,
        data.subject
    )


@router.get("/conversations/{conversation_id}", response_model=ConversationResponse, summary="Get a conversation")
async def get_conversation(
    conversation_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    return await service.conversations.get(conversation_id, current_user.id)


@router.get(
    "/conversations/{conversation_id}/messages",
    response_model=MessageListResponse,
    summary="Get message history",
    description="Messages in chronological order (oldest first)."
)
async def get_messages(
    conversation_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    await service.conversations.get(conversation_id, current_user.id)
    messages = await service.messages.list(conversation_id)
    return MessageListResponse(messages=messages, total=len(messages))


@router.post("/conversations/{conversation_id}/archive", response_model=ConversationResponse, summary="Archive for me")
async def archive_conversation(
    conversation_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    return await service.conversations.archive(current_user.id, conversation_id)


@router.post("/conversations/{conversation_id}/unarchive", response_model=ConversationResponse, summary="Unarchive for me")
async def unarchive_conversation(
    conversation_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    return await service.conversations.unarchive(current_user.id, conversation_id)


@router.post(
    "/conversations/{conversation_id}/read",
    response_model=MarkConversationReadResponse,
    summary="Mark conversation read",
    description="Marks every unread message addressed to you as read and resets your unread counter."
)
async def mark_conversation_read(
    conversation_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    marked = await service.messages.mark_conversation_read(conversation_id, current_user.id)
    return MarkConversationReadResponse(marked_read=marked)


@router.post(
    "/conversations/{conversation_id}/reconcile",
    response_model=ConversationResponse,
    summary="Recompute conversation summary",
    description="Rebuilds the last-message preview and unread counters from the stored messages."
)
async def reconcile_conversation(
    conversation_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    await service.conversations.get(conversation_id, current_user.id)
    return await service.conversations.reconcile(conversation_id)

# ============================================
# MESSAGE ENDPOINTS
# ============================================

@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a direct message",
    description="""
    Send a message to another user. The conversation is created on first contact.

    **Fails when:**
    - the recipient does not accept direct messages (403)
    - you are on the recipient's block list (403)
    """
)
async def send_message(
    message: MessageBody,
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    return await service.messages.send(
        MessageCreate(sender=current_user.as_participant(), **message.model_dump())
    )


@router.post("/{message_id}/read", response_model=MessageResponse, summary="Mark a message read")
async def mark_message_read(
    message_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    message = await service.store.messages.get(message_id)
    # Only the recipient can mark a message read
    if message is None or message.recipient_id != current_user.id:
        raise NotFound(f"Message {message_id} not found")
    return await service.messages.mark_read(message_id)
