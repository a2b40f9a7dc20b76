"""Fulfillment domain exceptions.

``ProviderCredentialsMissing`` is fatal for a whole sync run and surfaces
as a 500 to HTTP callers.  ``ProviderError`` is recoverable: the engine
logs it, skips the affected batch and carries on.
"""

from __future__ import annotations


class ProviderCredentialsMissing(Exception):
    """The provider API user or key is not configured."""


class ProviderError(Exception):
    """A provider call failed (transport, HTTP status, timeout or bad payload)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
