# src/todo_companion/notify/desktop.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import shutil

from ..core.ports import Permission

logger = logging.getLogger(__name__)

_NOTIFY_SEND = "notify-send"
_TIMEOUT_S = 5.0


class NotifySendPlatform:
    """
    Desktop notifications through `notify-send` (libnotify).

    The desktop has no permission prompt of its own, so permission comes from
    settings: "on" grants, "off" denies, "auto" stays undecided until
    request_permission() probes that notify-send actually runs.
    """

    def __init__(self, mode: str = "auto") -> None:
        mode = (mode or "auto").strip().lower()
        if mode == "on":
            self._permission = Permission.GRANTED
        elif mode == "off":
            self._permission = Permission.DENIED
        else:
            self._permission = Permission.DEFAULT

    def is_supported(self) -> bool:
        return shutil.which(_NOTIFY_SEND) is not None

    def permission(self) -> Permission:
        return self._permission

    async def request_permission(self) -> Permission:
        if self._permission != Permission.DEFAULT:
            return self._permission
        try:
            proc = await asyncio.create_subprocess_exec(
                _NOTIFY_SEND,
                "--version",
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
            rc = await asyncio.wait_for(proc.wait(), timeout=_TIMEOUT_S)
        except (OSError, asyncio.TimeoutError):
            logger.debug("notify-send probe failed.", exc_info=True)
            rc = 1
        self._permission = Permission.GRANTED if rc == 0 else Permission.DENIED
        return self._permission

    async def show(self, title: str, body: str) -> bool:
        cmd = [_NOTIFY_SEND, "--app-name=todo", title]
        if body:
            cmd.append(body)
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            logger.warning("notify-send failed: %s", e)
            return False
        try:
            rc = await asyncio.wait_for(proc.wait(), timeout=_TIMEOUT_S)
        except asyncio.TimeoutError:
            logger.warning("notify-send timed out after %.0fs.", _TIMEOUT_S)
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            return False
        return rc == 0
