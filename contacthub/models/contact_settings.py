from sqlalchemy import String, Boolean, DateTime, Text, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from contacthub.database import Base, utcnow
from contacthub.models.enums import ContactRole, PrivacyLevel, enum_column
from datetime import datetime
from typing import Optional, Dict, Any, List
import uuid


def default_role_permissions() -> Dict[str, bool]:
    return {role.value: True for role in ContactRole}


class ContactSettings(Base):
    """
    Per-user privacy and contact preferences. Exactly one row per user.
    """
    __tablename__ = "contact_settings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    user_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    user_email: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    user_role: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    allow_contact_requests: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    allow_direct_messages: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    allow_meeting_requests: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # ContactRole value -> allowed
    role_permissions: Mapped[Dict[str, bool]] = mapped_column(JSON, default=default_role_permissions, nullable=False)

    privacy_level: Mapped[PrivacyLevel] = mapped_column(
        enum_column(PrivacyLevel),
        default=PrivacyLevel.PRIVATE,
        nullable=False
    )

    # Stored as JSON arrays, treated as sets
    blocked_users: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    whitelisted_users: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)

    contact_preferences: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    notification_settings: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    business_hours: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    auto_response: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    timezone: Mapped[str] = mapped_column(String(50), default="UTC", nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    def allows_role(self, role: Optional[str]) -> bool:
        """Roles outside ContactRole (admin, user, ...) are never restricted."""
        if role not in {r.value for r in ContactRole}:
            return True
        return (self.role_permissions or {}).get(role, True)

    def __repr__(self):
        return f"<ContactSettings(user_id={self.user_id}, privacy={self.privacy_level})>"
