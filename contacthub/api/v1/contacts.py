"""
Contact API Routes - settings, block/white lists and contact requests.
"""

from fastapi import APIRouter, Depends, Query, status
from datetime import datetime, timedelta
from typing import List, Optional
import uuid

from contacthub.core.config import settings as app_settings
from contacthub.core.dependencies import CurrentUser, get_contact_service, get_current_user, require_admin
from contacthub.database import utcnow
from contacthub.models.contact import RequestStatus, RequestType
from contacthub.models.enums import Priority, Category
from contacthub.schemas.common import MessageResult
from contacthub.schemas.contact import (
    ContactRequestBody,
    ContactRequestCreate,
    ContactRequestFilters,
    ContactRequestListResponse,
    ContactRequestResponse,
    ContactRequestRespond,
    ExpireRequestsResponse,
)
from contacthub.schemas.settings import BlockedUsersResponse, ContactSettingsResponse, ContactSettingsUpdate
from contacthub.services.contact_service import ContactService

router = APIRouter(
    prefix="/contacts",
    tags=["Contacts"]
)

# ============================================
# SETTINGS
# ============================================

@router.get(
    "/settings",
    response_model=ContactSettingsResponse,
    summary="Get my contact settings",
    description="Returns the stored settings, or the defaults if none were saved yet."
)
async def get_settings(
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    return await service.settings.effective(current_user.id)


@router.put(
    "/settings",
    response_model=ContactSettingsResponse,
    summary="Update my contact settings",
    description="Partial update: only the fields in the body are changed."
)
async def update_settings(
    update: ContactSettingsUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    return await service.settings.upsert(current_user.id, update)


@router.post("/block/{user_id}", response_model=MessageResult, summary="Block a user")
async def block_user(
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    await service.block_user(current_user.id, user_id)
    return {"message": "User blocked successfully"}


@router.post("/unblock/{user_id}", response_model=MessageResult, summary="Unblock a user")
async def unblock_user(
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    await service.unblock_user(current_user.id, user_id)
    return {"message": "User unblocked successfully"}


@router.get("/blocked", response_model=BlockedUsersResponse, summary="List blocked users")
async def get_blocked_users(
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    blocked = await service.settings.blocked_users(current_user.id)
    return BlockedUsersResponse(blocked_users=blocked, total=len(blocked))


@router.post(
    "/whitelist/{user_id}",
    response_model=MessageResult,
    summary="White-list a user",
    description="White-listed users bypass meeting and role restrictions (but not blocking)."
)
async def whitelist_user(
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    await service.settings.whitelist(current_user.id, user_id)
    return {"message": "User added to whitelist"}


@router.delete("/whitelist/{user_id}", response_model=MessageResult, summary="Remove a user from the white list")
async def unwhitelist_user(
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    await service.settings.unwhitelist(current_user.id, user_id)
    return {"message": "User removed from whitelist"}

# ============================================
# CONTACT REQUESTS
# ============================================

@router.post(
    "/requests",
    response_model=ContactRequestResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send contact request",
    description="""
    Send a contact request to another user.

    **Fails when:**
    - the target does not accept contact requests (403)
    - you are on the target's block list (403)
    - it is a meeting request and the target does not accept them (403)
    - the target does not accept contact from your role (403)
    """
)
async def send_contact_request(
    request: ContactRequestBody,
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    return await service.requests.send(
        ContactRequestCreate(requester=current_user.as_participant(), **request.model_dump())
    )


@router.get(
    "/requests",
    response_model=ContactRequestListResponse,
    summary="Get received requests",
    description="Requests sent to you, most urgent first, then newest first."
)
async def get_received_requests(
    status_filter: Optional[List[RequestStatus]] = Query(None, alias="status"),
    priority: Optional[List[Priority]] = Query(None),
    category: Optional[List[Category]] = Query(None),
    request_type: Optional[List[RequestType]] = Query(None),
    search: Optional[str] = Query(None, description="Search in subject, message and requester name"),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    filters = ContactRequestFilters(
        status=status_filter,
        priority=priority,
        category=category,
        request_type=request_type,
        search_term=search,
        date_from=date_from,
        date_to=date_to,
    )
    requests = await service.requests.list(current_user.id, filters)
    return ContactRequestListResponse(requests=requests, total=len(requests))


@router.get("/requests/sent", response_model=ContactRequestListResponse, summary="Get sent requests")
async def get_sent_requests(
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    requests = await service.requests.list_sent(current_user.id)
    return ContactRequestListResponse(requests=requests, total=len(requests))


@router.post(
    "/requests/expire",
    response_model=ExpireRequestsResponse,
    summary="Expire stale requests (admin)",
    description="Marks pending requests older than `days` (default REQUEST_EXPIRY_DAYS) as expired."
)
async def expire_requests(
    days: Optional[int] = Query(None, ge=0),
    _: CurrentUser = Depends(require_admin),
    service: ContactService = Depends(get_contact_service)
):
    cutoff = utcnow() - timedelta(days=app_settings.REQUEST_EXPIRY_DAYS if days is None else days)
    return ExpireRequestsResponse(expired=await service.requests.expire_stale(cutoff))


@router.post(
    "/requests/{request_id}/respond",
    response_model=ContactRequestResponse,
    summary="Approve or reject a request"
)
async def respond_to_request(
    request_id: uuid.UUID,
    response: ContactRequestRespond,
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    return await service.requests.respond(
        request_id,
        current_user.id,
        response.status,
        response.response_message
    )


@router.post("/requests/{request_id}/cancel", response_model=ContactRequestResponse, summary="Cancel a sent request")
async def cancel_request(
    request_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    return await service.requests.cancel(request_id, current_user.id)


@router.post("/requests/{request_id}/complete", response_model=ContactRequestResponse, summary="Mark a request completed")
async def complete_request(
    request_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    return await service.requests.complete(request_id, current_user.id)
