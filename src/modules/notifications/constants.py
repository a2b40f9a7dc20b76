"""Notification domain constants."""

from django.db import models


class AudienceScope(models.TextChoices):
    """Who may read a notification.

    ``USER`` rows target exactly one user; ``STAFF`` and ``ALL`` rows are
    shared and filtered at read time by the reader's role.
    """

    USER = "user", "Single user"
    STAFF = "staff", "Staff members"
    ALL = "all", "Everyone"


class NotificationLevel(models.TextChoices):
    INFO = "info", "Info"
    WARNING = "warning", "Warning"
    ERROR = "error", "Error"
    SUCCESS = "success", "Success"
