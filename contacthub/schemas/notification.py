from pydantic import BaseModel, ConfigDict
from typing import Optional, List, Any
from datetime import datetime
import uuid

from contacthub.models.notification import NotificationType
from contacthub.models.enums import Priority, Category


class NotificationResponse(BaseModel):
    id: uuid.UUID
    user_id: str
    notification_type: NotificationType
    title: str
    message: str
    related_id: Optional[str] = None
    related_type: Optional[str] = None
    is_read: bool
    read_at: Optional[datetime] = None
    priority: Priority
    category: Category
    action_required: bool
    action_url: Optional[str] = None
    extra_data: Optional[Any] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]
    total: int
    unread: int


class UnreadCountResponse(BaseModel):
    unread: int


class MarkAllReadResponse(BaseModel):
    marked_read: int
