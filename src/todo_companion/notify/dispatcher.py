# src/todo_companion/notify/dispatcher.py

from __future__ import annotations

import logging
from enum import StrEnum

from ..core.ports import InAppMessenger, NotificationPlatform, Permission

logger = logging.getLogger(__name__)


class DeliveryChannel(StrEnum):
    PLATFORM = "platform"
    IN_APP = "in_app"
    NONE = "none"  # even the fallback failed


class NotificationDispatcher:
    """
    Delivers fired reminders to the user.

    Prefers the platform notification; falls back to an in-app message when
    the platform is missing, permission is denied or declined, or the platform
    call fails. deliver() never raises.

    Permission is asked for at most once proactively (request_permission_on_load)
    and at most once lazily, on the first delivery that finds it undecided.
    """

    def __init__(
        self,
        platform: NotificationPlatform,
        fallback: InAppMessenger,
        *,
        title: str = "To-Do Reminder",
    ) -> None:
        self._platform = platform
        self._fallback = fallback
        self._title = title
        self._proactive_requested = False
        self._lazy_requested = False

    async def request_permission_on_load(self) -> Permission:
        if self._proactive_requested:
            return self._safe_permission()
        self._proactive_requested = True
        if not self._safe_supported():
            return Permission.DENIED
        if self._safe_permission() != Permission.DEFAULT:
            return self._safe_permission()
        return await self._safe_request()

    async def deliver(self, message: str) -> DeliveryChannel:
        if await self._try_platform(message):
            return DeliveryChannel.PLATFORM
        return self._deliver_in_app(message)

    async def _try_platform(self, message: str) -> bool:
        if not self._safe_supported():
            logger.debug("Platform notifications unavailable; using in-app message.")
            return False

        permission = self._safe_permission()
        if permission == Permission.DEFAULT and not self._lazy_requested:
            self._lazy_requested = True
            permission = await self._safe_request()

        if permission != Permission.GRANTED:
            logger.debug("Notification permission is %s; using in-app message.", permission)
            return False

        try:
            shown = await self._platform.show(self._title, message)
        except Exception:
            logger.exception("Platform notification failed; using in-app message.")
            return False
        if not shown:
            logger.warning("Platform notification was not shown; using in-app message.")
        return bool(shown)

    def _deliver_in_app(self, message: str) -> DeliveryChannel:
        try:
            self._fallback.show_message(message, "info")
        except Exception:
            logger.exception("In-app fallback failed; reminder not shown: %s", message)
            return DeliveryChannel.NONE
        return DeliveryChannel.IN_APP

    # ---- fallible platform calls ----

    def _safe_supported(self) -> bool:
        try:
            return bool(self._platform.is_supported())
        except Exception:
            logger.exception("Notification capability check failed.")
            return False

    def _safe_permission(self) -> Permission:
        try:
            return Permission(self._platform.permission())
        except Exception:
            logger.exception("Reading notification permission failed.")
            return Permission.DENIED

    async def _safe_request(self) -> Permission:
        try:
            result = Permission(await self._platform.request_permission())
        except Exception:
            logger.exception("Requesting notification permission failed.")
            return Permission.DENIED
        logger.info("Notification permission: %s", result.value)
        return result
