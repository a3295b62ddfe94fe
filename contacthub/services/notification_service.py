"""
Notification service - inbox records created as side effects of contact events.
"""

import logging
from functools import partial
from typing import Any, Awaitable, Callable, Dict, List, Optional
import uuid

from contacthub.core.errors import NotFound
from contacthub.database import as_utc, utcnow
from contacthub.models.enums import Priority, Category
from contacthub.models.notification import ContactNotification, NotificationType
from contacthub.repositories.store import ContactStore

logger = logging.getLogger(__name__)

# (user_id, payload) -> pushes to the user's live connections
Publisher = Callable[[str, Dict[str, Any]], Awaitable[None]]


class NotificationDispatcher:
    """
    Writes notification records and optionally pushes them in real time.

    Delivery is best-effort: ``notify`` never raises, so a failing inbox
    cannot fail the message or request that triggered it. The insert runs
    in a savepoint so a rejected row leaves the caller's transaction intact.

    With a transactional store the push waits for the commit, so clients
    never see a notification id that was rolled back.
    """

    def __init__(self, store: ContactStore, publisher: Optional[Publisher] = None):
        self.store = store
        self.publisher = publisher

    async def notify(
        self,
        user_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        related_id: Optional[str] = None,
        related_type: Optional[str] = None,
        priority: Priority = Priority.MEDIUM,
        category: Category = Category.OTHER,
        action_required: bool = False,
        action_url: Optional[str] = None,
        user_name: Optional[str] = None,
        user_email: Optional[str] = None,
        extra_data: Optional[Dict[str, Any]] = None,
    ) -> Optional[ContactNotification]:
        """
        Persist an unread notification for user_id.

        Returns the stored record, or None if it could not be stored.
        """
        record = ContactNotification(
            user_id=user_id,
            user_name=user_name,
            user_email=user_email,
            notification_type=notification_type,
            title=title,
            message=message,
            related_id=related_id,
            related_type=related_type,
            is_read=False,
            read_at=None,
            priority=priority,
            category=category,
            action_required=action_required,
            action_url=action_url,
            extra_data=extra_data,
        )
        try:
            async with self.store.notifications.savepoint():
                notification = await self.store.notifications.create(record)
        except Exception:
            logger.exception(f"Failed to store {notification_type.value} notification for {user_id}")
            return None

        if not self.store.on_commit(partial(self._push, notification)):
            await self._push(notification)
        return notification

    async def mark_read(self, notification_id: uuid.UUID) -> ContactNotification:
        """Idempotent: read_at is set on the first call only."""
        notification = await self.store.notifications.get(notification_id)
        if notification is None:
            raise NotFound(f"Notification {notification_id} not found")
        if notification.is_read:
            return notification

        return await self.store.notifications.update(notification_id, is_read=True, read_at=utcnow())

    async def mark_all_read(self, user_id: str) -> int:
        unread = await self.store.notifications.list(user_id=user_id, is_read=False)
        now = utcnow()
        for notification in unread:
            await self.store.notifications.update(notification.id, is_read=True, read_at=now)
        return len(unread)

    async def list(self, user_id: str, unread_only: bool = False) -> List[ContactNotification]:
        """Newest first."""
        filters: Dict[str, Any] = {"user_id": user_id}
        if unread_only:
            filters["is_read"] = False
        notifications = await self.store.notifications.list(**filters)
        return sorted(notifications, key=lambda n: as_utc(n.created_at), reverse=True)

    async def unread_count(self, user_id: str) -> int:
        return len(await self.store.notifications.list(user_id=user_id, is_read=False))

    async def _push(self, notification: ContactNotification) -> None:
        if self.publisher is None:
            return
        try:
            await self.publisher(notification.user_id, {
                "type": "notification",
                "data": {
                    "id": str(notification.id),
                    "notification_type": notification.notification_type.value,
                    "title": notification.title,
                    "message": notification.message,
                    "related_id": notification.related_id,
                    "related_type": notification.related_type,
                    "action_url": notification.action_url,
                },
            })
        except Exception:
            logger.exception(f"Realtime push failed for notification {notification.id}")
