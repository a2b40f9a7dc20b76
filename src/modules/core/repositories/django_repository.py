"""Django ORM implementation of the system settings repository."""

from __future__ import annotations

from typing import Optional

import structlog

from modules.core.models import SystemSetting
from modules.core.repositories.interfaces import ISystemSettingRepository

logger = structlog.get_logger(__name__)


class SystemSettingDjangoRepository(ISystemSettingRepository):
    """Settings are read fresh on every call; nothing is cached."""

    def get_value(self, key: str) -> Optional[str]:
        return (
            SystemSetting.objects.filter(key=key)
            .values_list("value", flat=True)
            .first()
        )

    def set_value(self, key: str, value: str) -> None:
        SystemSetting.objects.update_or_create(
            key=key, defaults={"value": value.strip()}
        )
        logger.info("system_setting.updated", key=key)
