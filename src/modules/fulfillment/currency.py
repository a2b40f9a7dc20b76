"""Provider-currency to settlement-currency conversion.

The rate lives in the admin-editable ``exchange_rate`` system setting and is
read on every call, so an edit takes effect on the next conversion.
"""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import TYPE_CHECKING, Optional

import structlog
from django.conf import settings

if TYPE_CHECKING:
    from modules.core.repositories.interfaces import ISystemSettingRepository

logger = structlog.get_logger(__name__)

EXCHANGE_RATE_SETTING = "exchange_rate"
CENTS = Decimal("0.01")


class CurrencyConverter:
    """Converts provider amounts (EUR) into the settlement currency (USD).

    The stored rate is EUR per one USD, so ``local = foreign / rate``.
    """

    def __init__(self, settings_repository: ISystemSettingRepository) -> None:
        self._settings_repo = settings_repository

    def current_rate(self) -> Decimal:
        """Stored rate, or the configured default when it is unusable."""
        raw = self._settings_repo.get_value(EXCHANGE_RATE_SETTING)
        rate = _parse_rate(raw)
        if rate is None:
            if raw is not None:
                logger.warning("fulfillment.exchange_rate_invalid", stored=raw)
            rate = Decimal(str(settings.FULFILLMENT_DEFAULT_EXCHANGE_RATE))
        return rate

    def to_local(
        self, amount_foreign: Decimal | int | float | str, as_of: Optional[datetime] = None
    ) -> Decimal:
        """Convert *amount_foreign* to settlement currency, rounded to cents.

        ``as_of`` is informational; the live rate is always used.
        """
        rate = self.current_rate()
        amount = Decimal(str(amount_foreign))
        local = (amount / rate).quantize(CENTS, rounding=ROUND_HALF_UP)
        logger.debug(
            "fulfillment.currency_converted",
            amount_foreign=str(amount),
            rate=str(rate),
            amount_local=str(local),
            as_of=as_of.isoformat() if as_of else None,
        )
        return local


def _parse_rate(raw: Optional[str]) -> Optional[Decimal]:
    if raw is None:
        return None
    try:
        rate = Decimal(raw.strip())
    except (InvalidOperation, AttributeError):
        return None
    if not rate.is_finite() or rate <= 0:
        return None
    return rate
