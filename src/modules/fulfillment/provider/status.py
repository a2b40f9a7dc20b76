"""Provider status vocabulary and its mapping onto item statuses.

The provider's lifecycle codes and interruption reasons are a versioned
external contract.  Both are modelled as enums with an ``UNKNOWN`` member so
that a code the provider adds later is recognised as unknown and mapped to a
safe on-hold status instead of falling through to an optimistic one.

``map_provider_status`` is total: any combination of inputs, including
``None`` and garbage strings, maps to a valid ``ItemStatus``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from modules.orders.constants import ItemStatus


class ProviderStatus(str, Enum):
    ENTERED = "entered"
    READY = "ready"
    WAITING_FOR_ASSIGNMENT = "waitingForAssignment"
    PARTLY_DELIVERED = "partlyDelivered"
    INTERRUPTED = "interrupted"
    FINISHED = "finished"
    ABORTED = "aborted"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: Optional[str]) -> ProviderStatus:
        try:
            return cls((raw or "").strip())
        except ValueError:
            return cls.UNKNOWN


class InterruptionReason(str, Enum):
    """Account-check / economy-state codes that need customer action."""

    WRONG_BACKUP_CODES = "wrongBA"
    WRONG_CREDENTIALS = "wrongUserPass"
    WRONG_CONSOLE = "wrongConsole"
    NO_CLUB = "noClub"
    TRANSFER_LIST_FULL = "tlFull"
    NOT_ENOUGH_COINS = "notEnoughCoins"
    LOGGED_IN_ON_CONSOLE = "console"
    NO_TRANSFER_MARKET = "noTM"
    WRONG_PERSONA = "wrongPersona"
    UNASSIGNED_ITEMS = "unassignedItemsPresent"
    CAPTCHA = "captcha"
    WEB_APP_LOCKED = "FailWebAppCustomerLocked"
    CONSOLE_LOGIN_TIMEOUT = "FailLoggedInConsoleTo"
    WRONG_CREDENTIALS_TIMEOUT = "FailedWrongCredentialsTo"
    WRONG_BACKUP_CODE_TIMEOUT = "FailedWrongBACodeTo"
    WEB_APP_NOT_UNLOCKED = "FailWebAppNotYetUnlocked"
    RECEIVER_LIST_FULL = "FailedTLfullReceiver"
    BELOW_MIN_TRANSFER = "belowMinTransfer"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: Optional[str]) -> InterruptionReason:
        try:
            return cls((raw or "").strip())
        except ValueError:
            return cls.UNKNOWN


# Customer-facing explanation for every known interruption reason.
INTERRUPTION_NOTES: dict[InterruptionReason, str] = {
    InterruptionReason.WRONG_BACKUP_CODES: (
        "Backup codes are wrong; new backup codes are needed."
    ),
    InterruptionReason.WRONG_CREDENTIALS: "The account email or password is wrong.",
    InterruptionReason.WRONG_CONSOLE: (
        "Wrong platform; check the platform chosen for the order."
    ),
    InterruptionReason.NO_CLUB: "The account has no club.",
    InterruptionReason.TRANSFER_LIST_FULL: (
        "Transfer list is full; at least 3 free slots are needed."
    ),
    InterruptionReason.NOT_ENOUGH_COINS: (
        "The account needs more than 1,500 coins before delivery."
    ),
    InterruptionReason.LOGGED_IN_ON_CONSOLE: "Please log out of the console.",
    InterruptionReason.NO_TRANSFER_MARKET: "The account has no transfer market access.",
    InterruptionReason.WRONG_PERSONA: "The account persona must be changed.",
    InterruptionReason.UNASSIGNED_ITEMS: (
        "There are unassigned items; keep them below 50."
    ),
    InterruptionReason.CAPTCHA: "A captcha must be solved on the account.",
    InterruptionReason.WEB_APP_LOCKED: "The web app is locked for this account.",
    InterruptionReason.CONSOLE_LOGIN_TIMEOUT: (
        "The customer stayed logged in on the console for too long."
    ),
    InterruptionReason.WRONG_CREDENTIALS_TIMEOUT: (
        "Credentials were not corrected in time."
    ),
    InterruptionReason.WRONG_BACKUP_CODE_TIMEOUT: (
        "Backup codes were not corrected in time."
    ),
    InterruptionReason.WEB_APP_NOT_UNLOCKED: (
        "The web app transfer market is not unlocked yet."
    ),
    InterruptionReason.RECEIVER_LIST_FULL: (
        "The receiving transfer list is full; free up slots."
    ),
    InterruptionReason.BELOW_MIN_TRANSFER: (
        "The remaining amount is below the minimum transfer size."
    ),
}


_DIRECT_MAPPING: dict[ProviderStatus, ItemStatus] = {
    ProviderStatus.ENTERED: ItemStatus.PROCESSING,
    ProviderStatus.READY: ItemStatus.PROCESSING,
    ProviderStatus.WAITING_FOR_ASSIGNMENT: ItemStatus.PROCESSING,
    ProviderStatus.PARTLY_DELIVERED: ItemStatus.SHIPPING,
    ProviderStatus.FINISHED: ItemStatus.COMPLETED,
    ProviderStatus.ABORTED: ItemStatus.CANCELLED,
}


@dataclass(frozen=True)
class MappedStatus:
    status: ItemStatus
    customer_note: Optional[str] = None


def map_provider_status(
    raw_status: Optional[str],
    account_check: Optional[str] = None,
    economy_state: Optional[str] = None,
) -> MappedStatus:
    """Translate a provider status triple into an item status.

    Only the ``interrupted`` path may produce a customer note, and only the
    account-check code decides it.  ``economy_state`` is descriptive text
    kept for diagnostics; it never changes the mapped status or the note.
    """
    provider_status = ProviderStatus.parse(raw_status)

    if provider_status is ProviderStatus.INTERRUPTED:
        reason = InterruptionReason.parse(account_check)
        note = INTERRUPTION_NOTES.get(reason)
        if note is None:
            return MappedStatus(ItemStatus.ON_HOLD_INTERNAL)
        return MappedStatus(ItemStatus.ON_HOLD_CUSTOMER, customer_note=note)

    return MappedStatus(
        _DIRECT_MAPPING.get(provider_status, ItemStatus.ON_HOLD_INTERNAL)
    )
