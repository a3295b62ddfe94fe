"""
Domain errors raised by the contact services.

Services raise these; the API layer turns them into JSON error responses
(see ``contact_error_handler``). All of them are recoverable: callers decide
whether to show the message to the user.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ContactError(ValueError):
    """Base class for every contact/messaging failure."""

    code = "contact_error"
    status_code = status.HTTP_400_BAD_REQUEST


class PermissionDenied(ContactError):
    """The recipient's settings do not allow this kind of contact."""

    code = "permission_denied"
    status_code = status.HTTP_403_FORBIDDEN


class ContactRequestsDisabled(PermissionDenied):
    code = "contact_requests_disabled"


class DirectMessagesDisabled(PermissionDenied):
    code = "direct_messages_disabled"


class MeetingRequestsDisabled(PermissionDenied):
    code = "meeting_requests_disabled"


class RoleContactDisabled(PermissionDenied):
    code = "role_contact_disabled"


class SenderBlocked(ContactError):
    """The requester/sender is on the target's block list."""

    code = "sender_blocked"
    status_code = status.HTTP_403_FORBIDDEN


class SettingsNotFound(ContactError):
    """Block/unblock attempted before the user saved any contact settings."""

    code = "settings_not_found"
    status_code = status.HTTP_404_NOT_FOUND


class InvalidStateTransition(ContactError):
    code = "invalid_state_transition"
    status_code = status.HTTP_409_CONFLICT


class NotFound(ContactError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class ConstraintViolation(ContactError):
    """A write collided with a storage constraint (e.g. a concurrent duplicate)."""

    code = "conflict"
    status_code = status.HTTP_409_CONFLICT


async def contact_error_handler(request: Request, exc: ContactError) -> JSONResponse:
    """Render a ContactError as ``{"error": ..., "message": ...}``."""
    logger.info(f"{request.method} {request.url.path} -> {exc.code}: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.code,
            "message": str(exc),
        },
    )
