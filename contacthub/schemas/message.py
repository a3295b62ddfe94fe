"""
Pydantic schemas for conversations and messages.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Any
from datetime import datetime
import uuid

from contacthub.models.message import ConversationType, ConversationStatus, MessageType
from contacthub.models.enums import Priority, Category
from contacthub.schemas.common import Participant

# ============================================
# MESSAGE SCHEMAS
# ============================================

class MessageBody(BaseModel):
    """
    Schema for sending a direct message (the sender is the caller).

    The conversation is resolved from the sender/recipient pair, so no
    conversation id is needed.
    """
    recipient: Participant
    content: str = Field(..., min_length=1, max_length=5000)
    message_type: MessageType = MessageType.TEXT
    subject: Optional[str] = Field(None, max_length=200)
    attachments: Optional[List[Any]] = None
    is_encrypted: bool = False
    priority: Priority = Priority.MEDIUM
    category: Category = Category.OTHER
    tags: Optional[List[str]] = None
    extra_data: Optional[Any] = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "recipient": {"id": "student-3", "name": "Kiran", "role": "student"},
                    "content": "Your pitch deck looks great!",
                    "category": "mentorship"
                }
            ]
        }
    )


class MessageCreate(MessageBody):
    """Service-level message: body plus the sender snapshot."""
    sender: Participant


class MessageResponse(BaseModel):
    id: uuid.UUID
    conversation_id: uuid.UUID
    sender_id: str
    sender_name: str
    sender_email: str
    sender_role: str
    recipient_id: str
    recipient_name: str
    recipient_email: str
    recipient_role: str
    message_type: MessageType
    subject: Optional[str] = None
    content: str
    attachments: Optional[List[Any]] = None
    is_read: bool
    read_at: Optional[datetime] = None
    is_encrypted: bool
    priority: Priority
    category: Category
    tags: Optional[List[str]] = None
    extra_data: Optional[Any] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MessageListResponse(BaseModel):
    messages: List[MessageResponse]
    total: int


class MarkConversationReadResponse(BaseModel):
    marked_read: int

# ============================================
# CONVERSATION SCHEMAS
# ============================================

class ConversationCreate(BaseModel):
    """Start (or fetch) the 1:1 conversation with another user."""
    participant: Participant
    subject: Optional[str] = Field(None, max_length=200)


class ConversationResponse(BaseModel):
    id: uuid.UUID
    participant1_id: str
    participant1_name: str
    participant1_email: str
    participant1_role: str
    participant2_id: str
    participant2_name: str
    participant2_email: str
    participant2_role: str
    conversation_type: ConversationType
    subject: str
    status: ConversationStatus
    last_message_at: Optional[datetime] = None
    last_message_id: Optional[uuid.UUID] = None
    last_message_content: Optional[str] = None
    last_message_sender: Optional[str] = None
    unread_count1: int
    unread_count2: int
    is_archived1: bool
    is_archived2: bool
    is_blocked1: bool
    is_blocked2: bool
    tags: Optional[List[str]] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
