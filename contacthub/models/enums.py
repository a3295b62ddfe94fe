import enum

from sqlalchemy import Enum as SQLEnum


class Priority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


# urgent > high > medium > low
PRIORITY_RANK = {
    Priority.LOW: 1,
    Priority.MEDIUM: 2,
    Priority.HIGH: 3,
    Priority.URGENT: 4,
}


class Category(str, enum.Enum):
    BUSINESS = "business"
    TECHNICAL = "technical"
    INVESTMENT = "investment"
    MENTORSHIP = "mentorship"
    PARTNERSHIP = "partnership"
    SUPPORT = "support"
    FEEDBACK = "feedback"
    OTHER = "other"


class ContactRole(str, enum.Enum):
    """Roles that can be allowed/denied individually in contact settings."""
    INVESTOR = "investor"
    MENTOR = "mentor"
    STARTUP = "startup"
    STUDENT = "student"


class PrivacyLevel(str, enum.Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    RESTRICTED = "restricted"
    CONFIDENTIAL = "confidential"


def enum_column(enum_cls: type) -> SQLEnum:
    """VARCHAR-backed enum storing the lowercase values, portable across backends."""
    return SQLEnum(
        enum_cls,
        native_enum=False,
        length=30,
        values_callable=lambda members: [m.value for m in members],
    )
