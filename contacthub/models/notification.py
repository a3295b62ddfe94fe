from sqlalchemy import String, Boolean, DateTime, Text, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from contacthub.database import Base, utcnow
from contacthub.models.enums import Priority, Category, enum_column
from datetime import datetime
from typing import Optional, Any
import uuid
import enum


class NotificationType(str, enum.Enum):
    NEW_MESSAGE = "new_message"
    NEW_CONTACT_REQUEST = "new_contact_request"
    MEETING_REQUEST = "meeting_request"
    MESSAGE_READ = "message_read"
    CONVERSATION_ARCHIVED = "conversation_archived"
    CONTACT_APPROVED = "contact_approved"
    CONTACT_REJECTED = "contact_rejected"
    SYSTEM_NOTIFICATION = "system_notification"


class ContactNotification(Base):
    """
    Inbox entry for a user, created as a side effect of request/message events.
    """
    __tablename__ = "contact_notifications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    user_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    user_email: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    notification_type: Mapped[NotificationType] = mapped_column(
        enum_column(NotificationType),
        nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    # e.g. ("contact_request", <request id>) or ("conversation", <conversation id>)
    related_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    related_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    read_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    priority: Mapped[Priority] = mapped_column(enum_column(Priority), nullable=False, default=Priority.MEDIUM)
    category: Mapped[Category] = mapped_column(enum_column(Category), nullable=False, default=Category.OTHER)
    action_required: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    action_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    extra_data: Mapped[Optional[Any]] = mapped_column("metadata", JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
