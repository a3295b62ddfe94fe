# This file makes 'models' a Python package
from contacthub.database import Base
from contacthub.models.contact_settings import ContactSettings
from contacthub.models.contact import ContactRequest, RequestStatus, RequestType
from contacthub.models.message import ContactConversation, ContactMessage
from contacthub.models.notification import ContactNotification, NotificationType

__all__ = [
    "Base",
    "ContactSettings",
    "ContactRequest",
    "RequestStatus",
    "RequestType",
    "ContactConversation",
    "ContactMessage",
    "ContactNotification",
    "NotificationType",
]
