"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that domain-specific
repository interfaces extend, plus the read contract for runtime settings.
Service-layer code depends on these abstractions, never on Django ORM
directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the domain entity managed by the
    repository (e.g. ``Order``, ``Notification``).
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its primary key."""


class ISystemSettingRepository(ABC):
    """Read/write contract for admin-editable key/value settings."""

    @abstractmethod
    def get_value(self, key: str) -> Optional[str]:
        """Return the stored value for *key*, or ``None`` when unset."""

    @abstractmethod
    def set_value(self, key: str, value: str) -> None:
        """Create or overwrite the value stored under *key*."""
