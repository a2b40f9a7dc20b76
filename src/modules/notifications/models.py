"""Notification model.

Broadcasts are explicit: ``audience`` says who may read a row, and a
database constraint keeps ``user`` set exactly when ``audience`` is
``user``.  Read-path filtering goes through ``visible_to``.
"""

from __future__ import annotations

from typing import Any

from django.conf import settings
from django.db import models

from modules.core.models import BaseModel
from modules.notifications.constants import AudienceScope, NotificationLevel


class NotificationQuerySet(models.QuerySet):
    def visible_to(self, user: Any) -> NotificationQuerySet:
        """Rows *user* may read: their own, everyone's, and staff rows for staff."""
        if user is None or not getattr(user, "is_authenticated", False):
            return self.none()
        scope = models.Q(audience=AudienceScope.USER, user=user) | models.Q(
            audience=AudienceScope.ALL
        )
        if user.is_staff:
            scope |= models.Q(audience=AudienceScope.STAFF)
        return self.filter(scope)


class Notification(BaseModel):
    audience: models.CharField = models.CharField(
        max_length=10,
        choices=AudienceScope.choices,
        default=AudienceScope.USER,
    )
    user: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notifications",
    )
    title: models.CharField = models.CharField(max_length=255)
    message: models.TextField = models.TextField(blank=True, default="")
    level: models.CharField = models.CharField(
        max_length=10,
        choices=NotificationLevel.choices,
        default=NotificationLevel.INFO,
    )
    link: models.CharField = models.CharField(max_length=255, blank=True, default="")
    is_read: models.BooleanField = models.BooleanField(default=False)

    objects = NotificationQuerySet.as_manager()

    class Meta:
        db_table = "notifications"
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(audience=AudienceScope.USER, user__isnull=False)
                    | (
                        ~models.Q(audience=AudienceScope.USER)
                        & models.Q(user__isnull=True)
                    )
                ),
                name="notifications_audience_matches_user",
            ),
        ]

    def __str__(self) -> str:
        return f"[{self.audience}] {self.title}"
