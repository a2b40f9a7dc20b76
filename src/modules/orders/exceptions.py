"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class OrderNotFound(Exception):
    """The requested order does not exist or has been soft-deleted."""


class OrderItemNotFound(Exception):
    """The requested order item does not exist or has been soft-deleted."""


class InvalidItemStatus(Exception):
    """The requested status is not part of the item status vocabulary."""
