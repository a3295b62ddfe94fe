from sqlalchemy import String, Boolean, DateTime, ForeignKey, Integer, Text, JSON, Uuid, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from contacthub.database import Base, utcnow
from contacthub.models.enums import Priority, Category, enum_column
from datetime import datetime
from typing import Optional, Any, List
import uuid
import enum


class ConversationType(str, enum.Enum):
    DIRECT_MESSAGE = "direct_message"
    GROUP_MESSAGE = "group_message"
    SUPPORT_CONVERSATION = "support_conversation"
    MEETING_DISCUSSION = "meeting_discussion"
    PROJECT_DISCUSSION = "project_discussion"


class ConversationStatus(str, enum.Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"
    BLOCKED = "blocked"
    DELETED = "deleted"


class MessageType(str, enum.Enum):
    TEXT = "text"
    IMAGE = "image"
    FILE = "file"
    MEETING_INVITE = "meeting_invite"
    SYSTEM_MESSAGE = "system_message"
    NOTIFICATION = "notification"


class ContactConversation(Base):
    """
    1:1 conversation between participant1 and participant2.

    Unread counters, archive and block flags are kept per participant
    (suffix 1 / 2). At most one conversation exists per unordered pair.
    """
    __tablename__ = "contact_conversations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    participant1_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    participant1_name: Mapped[str] = mapped_column(String(100), nullable=False)
    participant1_email: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    participant1_role: Mapped[str] = mapped_column(String(30), nullable=False, default="user")

    participant2_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    participant2_name: Mapped[str] = mapped_column(String(100), nullable=False)
    participant2_email: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    participant2_role: Mapped[str] = mapped_column(String(30), nullable=False, default="user")

    # The pair in sorted order, whichever participant started the conversation
    pair_low_id: Mapped[str] = mapped_column(String(64), nullable=False)
    pair_high_id: Mapped[str] = mapped_column(String(64), nullable=False)

    conversation_type: Mapped[ConversationType] = mapped_column(
        enum_column(ConversationType),
        nullable=False,
        default=ConversationType.DIRECT_MESSAGE
    )
    subject: Mapped[str] = mapped_column(String(200), nullable=False, default="Direct Message")
    status: Mapped[ConversationStatus] = mapped_column(
        enum_column(ConversationStatus),
        nullable=False,
        default=ConversationStatus.ACTIVE
    )

    # Denormalized for list-view performance
    last_message_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    last_message_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    last_message_content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    last_message_sender: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    unread_count1: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    unread_count2: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_archived1: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_archived2: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_blocked1: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_blocked2: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    tags: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)
    extra_data: Mapped[Optional[Any]] = mapped_column("metadata", JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint('pair_low_id', 'pair_high_id', name='uq_conversation_pair'),
    )

    def has_participant(self, user_id: str) -> bool:
        return user_id in (self.participant1_id, self.participant2_id)

    def slot(self, user_id: str) -> int:
        """1 or 2: which set of per-participant columns belongs to user_id."""
        if user_id == self.participant1_id:
            return 1
        if user_id == self.participant2_id:
            return 2
        raise ValueError(f"{user_id} is not part of conversation {self.id}")

    def unread_count_for(self, user_id: str) -> int:
        return getattr(self, f"unread_count{self.slot(user_id)}")

    def is_archived_for(self, user_id: str) -> bool:
        return getattr(self, f"is_archived{self.slot(user_id)}")


class ContactMessage(Base):
    __tablename__ = "contact_messages"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    conversation_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("contact_conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    sender_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    sender_name: Mapped[str] = mapped_column(String(100), nullable=False)
    sender_email: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    sender_role: Mapped[str] = mapped_column(String(30), nullable=False, default="user")

    recipient_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    recipient_name: Mapped[str] = mapped_column(String(100), nullable=False)
    recipient_email: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    recipient_role: Mapped[str] = mapped_column(String(30), nullable=False, default="user")

    message_type: Mapped[MessageType] = mapped_column(
        enum_column(MessageType),
        nullable=False,
        default=MessageType.TEXT
    )
    subject: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    attachments: Mapped[Optional[List[Any]]] = mapped_column(JSON, nullable=True)

    # Only read state changes after creation
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    read_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    is_encrypted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    priority: Mapped[Priority] = mapped_column(enum_column(Priority), nullable=False, default=Priority.MEDIUM)
    category: Mapped[Category] = mapped_column(enum_column(Category), nullable=False, default=Category.OTHER)
    tags: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)
    extra_data: Mapped[Optional[Any]] = mapped_column("metadata", JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
