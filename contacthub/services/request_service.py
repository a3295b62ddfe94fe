"""
Contact request service - send, respond to and list contact requests.
"""

import logging
from datetime import datetime
from typing import List, Optional
import uuid

from contacthub.core.errors import (
    ContactRequestsDisabled,
    InvalidStateTransition,
    MeetingRequestsDisabled,
    NotFound,
    PermissionDenied,
    RoleContactDisabled,
    SenderBlocked,
)
from contacthub.database import as_utc, utcnow
from contacthub.models.contact import ContactRequest, RequestStatus, RequestType
from contacthub.models.enums import PRIORITY_RANK, Priority
from contacthub.models.notification import NotificationType
from contacthub.repositories.store import ContactStore
from contacthub.schemas.contact import ContactRequestCreate, ContactRequestFilters
from contacthub.services.notification_service import NotificationDispatcher
from contacthub.services.settings_service import ContactSettingsStore

logger = logging.getLogger(__name__)

RESPONSE_STATUSES = (RequestStatus.APPROVED, RequestStatus.REJECTED)


class ContactRequestManager:
    """
    Lifecycle of contact requests.

    pending -> approved | rejected   (target responds)
    pending -> cancelled             (requester withdraws)
    pending -> expired               (stale sweep)
    approved -> completed            (either party)
    """

    def __init__(self, store: ContactStore, settings: ContactSettingsStore, notifier: NotificationDispatcher):
        self.store = store
        self.settings = settings
        self.notifier = notifier

    async def send(self, request: ContactRequestCreate) -> ContactRequest:
        """
        Create a pending request after checking the target's settings,
        then notify the target.
        """
        requester, target = request.requester, request.target
        if requester.id == target.id:
            raise PermissionDenied("Cannot send a contact request to yourself")

        target_settings = await self.settings.effective(target.id)

        if not target_settings.allow_contact_requests:
            raise ContactRequestsDisabled("Target user does not allow contact requests")

        if requester.id in (target_settings.blocked_users or []):
            raise SenderBlocked("You are blocked by this user")

        # White-listed users skip the finer-grained preferences
        if requester.id not in (target_settings.whitelisted_users or []):
            if request.request_type == RequestType.MEETING_REQUEST and not target_settings.allow_meeting_requests:
                raise MeetingRequestsDisabled("Target user does not accept meeting requests")
            if not target_settings.allows_role(requester.role):
                raise RoleContactDisabled(f"Target user does not accept contact from {requester.role} accounts")

        contact_request = await self.store.requests.create(
            ContactRequest(
                requester_id=requester.id,
                requester_name=requester.name,
                requester_email=requester.email,
                requester_role=requester.role,
                target_id=target.id,
                target_name=target.name,
                target_email=target.email,
                target_role=target.role,
                request_type=request.request_type,
                subject=request.subject,
                message=request.message,
                status=RequestStatus.PENDING,
                priority=request.priority,
                category=request.category,
                attachments=request.attachments,
                scheduled_meeting=request.scheduled_meeting,
                follow_up_date=request.follow_up_date,
                tags=request.tags,
                extra_data=request.extra_data,
            )
        )
        logger.info(f"Contact request {contact_request.id} sent: {requester.id} -> {target.id}")

        await self.notifier.notify(
            user_id=target.id,
            user_name=target.name,
            user_email=target.email,
            notification_type=NotificationType.NEW_CONTACT_REQUEST,
            title="New Contact Request",
            message=f"{requester.name} sent you a contact request",
            related_id=str(contact_request.id),
            related_type="contact_request",
            priority=request.priority,
            category=request.category,
            action_required=True,
            action_url=f"/contacts/requests/{contact_request.id}",
            extra_data={"requester_id": requester.id, "requester_role": requester.role},
        )

        return contact_request

    async def respond(
        self,
        request_id: uuid.UUID,
        responder_id: str,
        status: RequestStatus,
        response_message: Optional[str] = None
    ) -> ContactRequest:
        """
        Approve or reject a pending request and notify the requester.

        Only the target may respond, and only once.
        """
        if status not in RESPONSE_STATUSES:
            raise InvalidStateTransition(f"Cannot respond with status '{status.value}'")

        contact_request = await self._get(request_id)

        if contact_request.target_id != responder_id:
            raise PermissionDenied("Only the recipient can respond to this request")

        if contact_request.status != RequestStatus.PENDING:
            raise InvalidStateTransition(
                f"Contact request already {contact_request.status.value}"
            )

        contact_request = await self.store.requests.update(
            request_id,
            status=status,
            response_message=response_message,
            responded_at=utcnow(),
            responded_by=responder_id,
        )
        logger.info(f"Contact request {request_id} {status.value} by {responder_id}")

        approved = status == RequestStatus.APPROVED
        await self.notifier.notify(
            user_id=contact_request.requester_id,
            user_name=contact_request.requester_name,
            user_email=contact_request.requester_email,
            notification_type=NotificationType.CONTACT_APPROVED if approved else NotificationType.CONTACT_REJECTED,
            title=f"Contact Request {'Approved' if approved else 'Rejected'}",
            message=f"Your contact request has been {status.value}",
            related_id=str(request_id),
            related_type="contact_request",
            priority=Priority.MEDIUM,
            category=contact_request.category,
            action_required=False,
            extra_data={"target_id": contact_request.target_id, "target_name": contact_request.target_name},
        )

        return contact_request

    async def cancel(self, request_id: uuid.UUID, requester_id: str) -> ContactRequest:
        contact_request = await self._get(request_id)

        if contact_request.requester_id != requester_id:
            raise PermissionDenied("Only the requester can cancel this request")
        if contact_request.status != RequestStatus.PENDING:
            raise InvalidStateTransition(f"Contact request already {contact_request.status.value}")

        logger.info(f"Contact request {request_id} cancelled by {requester_id}")
        return await self.store.requests.update(request_id, status=RequestStatus.CANCELLED)

    async def complete(self, request_id: uuid.UUID, user_id: str) -> ContactRequest:
        contact_request = await self._get(request_id)

        if user_id not in (contact_request.requester_id, contact_request.target_id):
            raise PermissionDenied("Only the requester or recipient can complete this request")
        if contact_request.status != RequestStatus.APPROVED:
            raise InvalidStateTransition(
                f"Only approved requests can be completed (status: {contact_request.status.value})"
            )

        return await self.store.requests.update(request_id, status=RequestStatus.COMPLETED)

    async def expire_stale(self, older_than: datetime) -> int:
        """Expire every pending request created before ``older_than``."""
        cutoff = as_utc(older_than)
        pending = await self.store.requests.list(status=RequestStatus.PENDING)

        expired = 0
        for contact_request in pending:
            if as_utc(contact_request.created_at) < cutoff:
                await self.store.requests.update(contact_request.id, status=RequestStatus.EXPIRED)
                expired += 1

        if expired:
            logger.info(f"Expired {expired} stale contact requests (cutoff {cutoff.isoformat()})")
        return expired

    async def list(self, user_id: str, filters: Optional[ContactRequestFilters] = None) -> List[ContactRequest]:
        """
        Requests received by user_id.

        Sorted by priority (urgent first), then newest first.
        """
        requests = await self.store.requests.list(target_id=user_id)
        filters = filters or ContactRequestFilters()

        if filters.status:
            requests = [r for r in requests if r.status in filters.status]
        if filters.priority:
            requests = [r for r in requests if r.priority in filters.priority]
        if filters.category:
            requests = [r for r in requests if r.category in filters.category]
        if filters.request_type:
            requests = [r for r in requests if r.request_type in filters.request_type]

        if filters.search_term:
            term = filters.search_term.lower()
            requests = [
                r for r in requests
                if term in r.subject.lower()
                or term in r.message.lower()
                or term in r.requester_name.lower()
            ]

        if filters.date_from:
            start = as_utc(filters.date_from)
            requests = [r for r in requests if as_utc(r.created_at) >= start]
        if filters.date_to:
            end = as_utc(filters.date_to)
            requests = [r for r in requests if as_utc(r.created_at) <= end]

        return sorted(
            requests,
            key=lambda r: (PRIORITY_RANK[r.priority], as_utc(r.created_at)),
            reverse=True
        )

    async def list_sent(self, user_id: str) -> List[ContactRequest]:
        requests = await self.store.requests.list(requester_id=user_id)
        return sorted(requests, key=lambda r: as_utc(r.created_at), reverse=True)

    async def _get(self, request_id: uuid.UUID) -> ContactRequest:
        contact_request = await self.store.requests.get(request_id)
        if contact_request is None:
            raise NotFound(f"Contact request {request_id} not found")
        return contact_request
