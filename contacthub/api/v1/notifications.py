"""
Notification API - inbox over REST, live delivery over a WebSocket.
"""

from fastapi import (
    APIRouter, Depends, HTTPException,
    Query, WebSocket, WebSocketDisconnect, status
)
import json
import logging
import uuid

from contacthub.core.dependencies import CurrentUser, get_contact_service, get_current_user, user_from_token
from contacthub.core.errors import NotFound
from contacthub.schemas.notification import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from contacthub.services.contact_service import ContactService
from contacthub.websocket.manager import manager

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/notifications",
    tags=["Notifications"]
)


@router.get("", response_model=NotificationListResponse, summary="List my notifications")
async def list_notifications(
    unread_only: bool = Query(False),
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    notifications = await service.notifications.list(current_user.id, unread_only=unread_only)
    unread = await service.notifications.unread_count(current_user.id)
    return NotificationListResponse(notifications=notifications, total=len(notifications), unread=unread)


@router.get("/unread-count", response_model=UnreadCountResponse, summary="Unread badge count")
async def unread_count(
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    return UnreadCountResponse(unread=await service.notifications.unread_count(current_user.id))


@router.post("/read-all", response_model=MarkAllReadResponse, summary="Mark all notifications read")
async def mark_all_read(
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    return MarkAllReadResponse(marked_read=await service.notifications.mark_all_read(current_user.id))


@router.post("/{notification_id}/read", response_model=NotificationResponse, summary="Mark a notification read")
async def mark_read(
    notification_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service)
):
    notification = await service.store.notifications.get(notification_id)
    if notification is None or notification.user_id != current_user.id:
        raise NotFound(f"Notification {notification_id} not found")
    return await service.notifications.mark_read(notification_id)


@router.websocket("/ws")
async def notification_socket(
    websocket: WebSocket,
    token: str = Query(..., description="JWT authentication token")
):
    """
    Live notification feed.

    **Authentication:**
    - JWT passed as the `token` query parameter
    - Connection closed with 1008 if authentication fails

    **Outgoing Events:**
    - `notification`: a notification was stored for you
        ```json
        {
            "type": "notification",
            "data": {"id": "...", "notification_type": "new_message", "title": "...", ...}
        }
        ```

    Incoming frames are ignored except `{"type": "ping"}`, answered with `pong`.
    Frames that are not JSON get `{"type": "error", "message": "Invalid JSON"}`.
    """
    try:
        user = user_from_token(token)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await manager.connect(websocket, user.id)
    try:
        while True:
            data = await websocket.receive_text()

            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await websocket.send_json({
                    "type": "error",
                    "message": "Invalid JSON"
                })
                continue

            if isinstance(message, dict) and message.get("type") == "ping":
                await websocket.send_json({"type": "pong"})

    except WebSocketDisconnect:
        logger.info(f"Notification socket closed: user={user.id}")
    except Exception as e:
        logger.error(f"Notification socket error for {user.id}: {e}")
    finally:
        manager.disconnect(websocket, user.id)
