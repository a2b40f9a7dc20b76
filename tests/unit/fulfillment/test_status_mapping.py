"""Unit tests for provider status mapping."""

import pytest

from modules.fulfillment.provider.status import (
    INTERRUPTION_NOTES,
    InterruptionReason,
    ProviderStatus,
    map_provider_status,
)
from modules.orders.constants import ItemStatus

pytestmark = pytest.mark.unit


class TestDirectMapping:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("entered", ItemStatus.PROCESSING),
            ("ready", ItemStatus.PROCESSING),
            ("waitingForAssignment", ItemStatus.PROCESSING),
            ("partlyDelivered", ItemStatus.SHIPPING),
            ("finished", ItemStatus.COMPLETED),
            ("aborted", ItemStatus.CANCELLED),
        ],
    )
    def test_known_status(self, raw, expected):
        mapped = map_provider_status(raw)
        assert mapped.status == expected
        assert mapped.customer_note is None

    @pytest.mark.parametrize("raw", [None, "", "garbage", "FINISHED", "unknown"])
    def test_unknown_status_goes_on_internal_hold(self, raw):
        mapped = map_provider_status(raw)
        assert mapped.status == ItemStatus.ON_HOLD_INTERNAL
        assert mapped.customer_note is None

    def test_surrounding_whitespace_is_ignored(self):
        assert map_provider_status("  finished ").status == ItemStatus.COMPLETED

    def test_non_interrupted_status_ignores_reason(self):
        mapped = map_provider_status("finished", account_check="wrongBA")
        assert mapped.status == ItemStatus.COMPLETED
        assert mapped.customer_note is None


class TestInterrupted:
    def test_known_account_check_needs_customer(self):
        mapped = map_provider_status("interrupted", account_check="wrongBA")
        assert mapped.status == ItemStatus.ON_HOLD_CUSTOMER
        assert mapped.customer_note == INTERRUPTION_NOTES[
            InterruptionReason.WRONG_BACKUP_CODES
        ]

    def test_known_economy_state_does_not_supply_note(self):
        mapped = map_provider_status(
            "interrupted", account_check="someNewCode", economy_state="tlFull"
        )
        assert mapped.status == ItemStatus.ON_HOLD_INTERNAL
        assert mapped.customer_note is None

    def test_note_comes_from_account_check_not_economy_state(self):
        mapped = map_provider_status("interrupted", "captcha", "tlFull")
        assert mapped.status == ItemStatus.ON_HOLD_CUSTOMER
        assert mapped.customer_note == INTERRUPTION_NOTES[InterruptionReason.CAPTCHA]

    def test_unknown_reason_is_internal_hold_without_note(self):
        mapped = map_provider_status("interrupted", "somethingNew", "alsoNew")
        assert mapped.status == ItemStatus.ON_HOLD_INTERNAL
        assert mapped.customer_note is None

    def test_missing_reason_is_internal_hold(self):
        mapped = map_provider_status("interrupted")
        assert mapped.status == ItemStatus.ON_HOLD_INTERNAL
        assert mapped.customer_note is None

    def test_every_known_reason_has_a_note(self):
        known = {r for r in InterruptionReason if r is not InterruptionReason.UNKNOWN}
        assert set(INTERRUPTION_NOTES) == known


class TestProviderStatusParse:
    def test_parse_known(self):
        assert ProviderStatus.parse("partlyDelivered") is ProviderStatus.PARTLY_DELIVERED

    def test_parse_unknown(self):
        assert ProviderStatus.parse("whatever") is ProviderStatus.UNKNOWN
        assert ProviderStatus.parse(None) is ProviderStatus.UNKNOWN


def test_mapper_is_total_over_every_combination():
    raws = [s.value for s in ProviderStatus] + [None, "", "x"]
    reasons = [r.value for r in InterruptionReason] + [None, "", "x"]
    for raw in raws:
        for reason in reasons:
            mapped = map_provider_status(raw, reason, reason)
            assert mapped.status in ItemStatus.values
            if mapped.customer_note is not None:
                assert raw == "interrupted"
