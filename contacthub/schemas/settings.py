"""
Pydantic schemas for contact settings.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any, List
from datetime import datetime
import uuid

from contacthub.models.enums import ContactRole, PrivacyLevel


class ContactSettingsUpdate(BaseModel):
    """
    Partial update of a user's contact settings.

    Only fields that are explicitly sent are applied; omitted fields keep
    their stored value. ``role_permissions`` is merged key by key.
    """
    user_name: Optional[str] = Field(None, max_length=100)
    user_email: Optional[str] = Field(None, max_length=100)
    user_role: Optional[str] = Field(None, max_length=30)

    allow_contact_requests: Optional[bool] = None
    allow_direct_messages: Optional[bool] = None
    allow_meeting_requests: Optional[bool] = None
    role_permissions: Optional[Dict[ContactRole, bool]] = None

    privacy_level: Optional[PrivacyLevel] = None
    blocked_users: Optional[List[str]] = None
    whitelisted_users: Optional[List[str]] = None

    contact_preferences: Optional[Dict[str, Any]] = None
    notification_settings: Optional[Dict[str, Any]] = None
    business_hours: Optional[Dict[str, Any]] = None
    auto_response: Optional[str] = None
    timezone: Optional[str] = Field(None, max_length=50)

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "allow_direct_messages": False,
                    "role_permissions": {"investor": False}
                }
            ]
        }
    )


class ContactSettingsResponse(BaseModel):
    id: Optional[uuid.UUID] = None
    user_id: str
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    user_role: Optional[str] = None
    allow_contact_requests: bool
    allow_direct_messages: bool
    allow_meeting_requests: bool
    role_permissions: Dict[str, bool]
    privacy_level: PrivacyLevel
    blocked_users: List[str]
    whitelisted_users: List[str]
    contact_preferences: Dict[str, Any]
    notification_settings: Dict[str, Any]
    business_hours: Optional[Dict[str, Any]] = None
    auto_response: Optional[str] = None
    timezone: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BlockedUsersResponse(BaseModel):
    blocked_users: List[str]
    total: int
