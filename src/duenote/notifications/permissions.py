# src/duenote/notifications/permissions.py

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class StaticPermissionGate:
    """
    Permission gate with a fixed answer.

    A desktop process has no OS-level notification prompt to show, so the
    answer comes from settings (notifications_enabled).
    """

    def __init__(self, granted: bool = True) -> None:
        self._granted = bool(granted)

    async def request(self) -> bool:
        logger.debug("Notification permission requested -> %s", self._granted)
        return self._granted
