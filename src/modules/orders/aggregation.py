"""Derive a parent order status from its item statuses."""

from __future__ import annotations

from typing import Iterable

from modules.orders.constants import ItemStatus

# Lower number = more urgent.  Unknown statuses never outrank a known one.
STATUS_PRIORITY: dict[str, int] = {
    ItemStatus.ON_HOLD_CUSTOMER: 1,
    ItemStatus.ON_HOLD_INTERNAL: 2,
    ItemStatus.NEW: 3,
    ItemStatus.PROCESSING: 4,
    ItemStatus.CREDENTIALS_SENT: 4,
    ItemStatus.SHIPPING: 5,
    ItemStatus.IN_PROGRESS: 5,
    ItemStatus.COMPLETED: 8,
    ItemStatus.COMPLETED_COMP: 8,
    ItemStatus.CANCELLED: 9,
    ItemStatus.REFUNDED: 10,
}

UNKNOWN_PRIORITY = 99


def status_priority(status: str) -> int:
    return STATUS_PRIORITY.get(status, UNKNOWN_PRIORITY)


def worst_status(statuses: Iterable[str]) -> str:
    """Return the most urgent status in *statuses*.

    Among equal priorities the first one encountered wins, so the result
    depends on input order; pass items in creation order for a stable
    answer.  An empty input yields ``new``.
    """
    worst: str | None = None
    worst_priority = UNKNOWN_PRIORITY + 1
    for status in statuses:
        priority = status_priority(status)
        if priority < worst_priority:
            worst, worst_priority = status, priority
    if worst is None:
        return ItemStatus.NEW.value
    return str(worst)
