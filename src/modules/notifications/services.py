"""Notification service layer."""

from __future__ import annotations

from typing import Any

import structlog

from modules.notifications.constants import AudienceScope, NotificationLevel
from modules.notifications.exceptions import NotificationNotFound
from modules.notifications.models import Notification, NotificationQuerySet

logger = structlog.get_logger(__name__)


class NotificationService:
    def broadcast_to_staff(
        self,
        title: str,
        message: str = "",
        level: str = NotificationLevel.INFO,
        link: str = "",
    ) -> Notification:
        """Create one shared row readable by every staff member."""
        notification = Notification.objects.create(
            audience=AudienceScope.STAFF,
            title=title,
            message=message,
            level=level,
            link=link,
        )
        logger.info(
            "notification.broadcast",
            notification_id=str(notification.id),
            audience=AudienceScope.STAFF.value,
        )
        return notification

    def notify_user(
        self,
        user: Any,
        title: str,
        message: str = "",
        level: str = NotificationLevel.INFO,
        link: str = "",
    ) -> Notification:
        return Notification.objects.create(
            audience=AudienceScope.USER,
            user=user,
            title=title,
            message=message,
            level=level,
            link=link,
        )

    def list_for(self, user: Any) -> NotificationQuerySet:
        return Notification.objects.visible_to(user)

    def mark_read(self, notification_id: str, user: Any) -> Notification:
        """Mark one of the reader's own notifications as read.

        Shared (staff/all) rows carry no per-reader state and cannot be
        marked.

        Raises:
            NotificationNotFound: no such user-scoped row for *user*.
        """
        notification = (
            Notification.objects.filter(
                id=notification_id, audience=AudienceScope.USER, user=user
            ).first()
            if user is not None
            else None
        )
        if notification is None:
            raise NotificationNotFound(f"Notification {notification_id} not found.")
        if not notification.is_read:
            notification.is_read = True
            notification.save(update_fields=["is_read"])
        return notification

    def mark_all_read(self, user: Any) -> int:
        count = Notification.objects.filter(
            audience=AudienceScope.USER, user=user, is_read=False
        ).update(is_read=True)
        logger.info("notification.marked_all_read", user_id=user.pk, count=count)
        return count
