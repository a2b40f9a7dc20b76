"""Order domain constants.

Defines the item status vocabulary shared by order items and their parent
order, the item categories, and the terminal set that stops provider
reconciliation.
"""

from django.db import models


class ItemStatus(models.TextChoices):
    NEW = "new", "New"
    PROCESSING = "processing", "Processing"
    SHIPPING = "shipping", "Shipping"
    CREDENTIALS_SENT = "credentials_sent", "Credentials sent"
    IN_PROGRESS = "in_progress", "In progress"
    ON_HOLD_CUSTOMER = "on_hold_customer", "On hold - customer action"
    ON_HOLD_INTERNAL = "on_hold_internal", "On hold - internal"
    COMPLETED = "completed", "Completed"
    COMPLETED_COMP = "completed_comp", "Completed with compensation"
    CANCELLED = "cancelled", "Cancelled"
    REFUNDED = "refunded", "Refunded"


class ItemType(models.TextChoices):
    CURRENCY_BUNDLE = "currency_bundle", "Currency bundle"
    RANK_BOOST = "rank_boost", "Rank boost"
    CHALLENGE_SERVICE = "challenge_service", "Challenge service"
    OTHER = "other", "Other"


TERMINAL_STATUSES: frozenset[str] = frozenset(
    {
        ItemStatus.COMPLETED,
        ItemStatus.COMPLETED_COMP,
        ItemStatus.CANCELLED,
        ItemStatus.REFUNDED,
    }
)

ON_HOLD_STATUSES: frozenset[str] = frozenset(
    {ItemStatus.ON_HOLD_CUSTOMER, ItemStatus.ON_HOLD_INTERNAL}
)

BULK_STATUS_UPDATE_NOTE = "Bulk status update"
