"""
Pydantic schemas for contact requests.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Any
from datetime import datetime
import uuid

from contacthub.models.contact import RequestStatus, RequestType
from contacthub.models.enums import Priority, Category
from contacthub.schemas.common import Participant


class ContactRequestBody(BaseModel):
    """Schema for sending a contact request (the requester is the caller)."""
    target: Participant
    request_type: RequestType = RequestType.GENERAL_INQUIRY
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)
    priority: Priority = Priority.MEDIUM
    category: Category = Category.OTHER
    attachments: Optional[List[Any]] = None
    scheduled_meeting: Optional[Any] = None
    follow_up_date: Optional[datetime] = None
    tags: Optional[List[str]] = None
    extra_data: Optional[Any] = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "target": {"id": "investor-7", "name": "Dev Mehta", "role": "investor"},
                    "request_type": "investment_inquiry",
                    "subject": "Seed round",
                    "message": "We would love 20 minutes of your time.",
                    "priority": "high",
                    "category": "investment"
                }
            ]
        }
    )


class ContactRequestCreate(ContactRequestBody):
    """Service-level request: body plus the requester snapshot."""
    requester: Participant


class ContactRequestRespond(BaseModel):
    status: RequestStatus
    response_message: Optional[str] = Field(None, max_length=5000)

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        """Only approve/reject are valid responses."""
        if v not in (RequestStatus.APPROVED, RequestStatus.REJECTED):
            raise ValueError("status must be one of: approved, rejected")
        return v


class ContactRequestFilters(BaseModel):
    """
    Filters for listing received requests. List filters match any of the
    given values; ``search_term`` is a case-insensitive substring over
    subject, message and requester name.
    """
    status: Optional[List[RequestStatus]] = None
    priority: Optional[List[Priority]] = None
    category: Optional[List[Category]] = None
    request_type: Optional[List[RequestType]] = None
    search_term: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None


class ContactRequestResponse(BaseModel):
    id: uuid.UUID
    requester_id: str
    requester_name: str
    requester_email: str
    requester_role: str
    target_id: str
    target_name: str
    target_email: str
    target_role: str
    request_type: RequestType
    subject: str
    message: str
    status: RequestStatus
    priority: Priority
    category: Category
    attachments: Optional[List[Any]] = None
    response_message: Optional[str] = None
    responded_at: Optional[datetime] = None
    responded_by: Optional[str] = None
    scheduled_meeting: Optional[Any] = None
    follow_up_date: Optional[datetime] = None
    tags: Optional[List[str]] = None
    extra_data: Optional[Any] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ContactRequestListResponse(BaseModel):
    requests: List[ContactRequestResponse]
    total: int


class ExpireRequestsResponse(BaseModel):
    expired: int
