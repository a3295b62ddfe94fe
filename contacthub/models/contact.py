from sqlalchemy import String, DateTime, Text, JSON, Uuid, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from contacthub.database import Base, utcnow
from contacthub.models.enums import Priority, Category, enum_column
from datetime import datetime
from typing import Optional, Any, List
import uuid
import enum


class RequestType(str, enum.Enum):
    GENERAL_INQUIRY = "general_inquiry"
    MEETING_REQUEST = "meeting_request"
    COLLABORATION_REQUEST = "collaboration_request"
    INVESTMENT_INQUIRY = "investment_inquiry"
    MENTORSHIP_REQUEST = "mentorship_request"
    PARTNERSHIP_REQUEST = "partnership_request"
    SUPPORT_REQUEST = "support_request"
    FEEDBACK_REQUEST = "feedback_request"
    OTHER = "other"


class RequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class ContactRequest(Base):
    """
    Inbound contact request from requester to target.

    Lifecycle: pending -> approved | rejected | cancelled | expired,
    approved -> completed.
    """
    __tablename__ = "contact_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    requester_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    requester_name: Mapped[str] = mapped_column(String(100), nullable=False)
    requester_email: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    requester_role: Mapped[str] = mapped_column(String(30), nullable=False, default="user")

    target_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    target_name: Mapped[str] = mapped_column(String(100), nullable=False)
    target_email: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    target_role: Mapped[str] = mapped_column(String(30), nullable=False, default="user")

    request_type: Mapped[RequestType] = mapped_column(enum_column(RequestType), nullable=False)
    subject: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[RequestStatus] = mapped_column(
        enum_column(RequestStatus),
        nullable=False,
        default=RequestStatus.PENDING,
        index=True
    )
    priority: Mapped[Priority] = mapped_column(enum_column(Priority), nullable=False, default=Priority.MEDIUM)
    category: Mapped[Category] = mapped_column(enum_column(Category), nullable=False, default=Category.OTHER)

    attachments: Mapped[Optional[List[Any]]] = mapped_column(JSON, nullable=True)
    response_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    responded_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    responded_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    scheduled_meeting: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    follow_up_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    tags: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)
    # 'metadata' is reserved on declarative classes
    extra_data: Mapped[Optional[Any]] = mapped_column("metadata", JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint('requester_id != target_id', name='no_self_request'),
    )

    def __repr__(self):
        return f"<ContactRequest(id={self.id}, {self.requester_id} -> {self.target_id}, status={self.status})>"
