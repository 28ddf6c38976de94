"""
Desktop Notifier — platform-aware rendering of the session time as an OS
notification.

Every snapshot updates the rendered text. A desktop notification is only
pushed on mode transitions and on every Idle (00:00:00) value, so a running
timer does not spawn a process per second.

When a break runs out the bus carries 00:00:00 twice: the last OnBreak tick,
then the Idle value. The first is still an OnBreak snapshot, so only the Idle
one is pushed and the user sees the finished break once.
"""

from __future__ import annotations

import logging
import shutil
import sys
from collections import deque
from typing import Optional

from ..timer.state import IDLE_TIME, SessionMode, SessionSnapshot
from .processes import HelperProcesses

logger = logging.getLogger(__name__)

APP_TITLE = "RhythmWatch"


def render(snapshot: SessionSnapshot) -> str:
    if snapshot.mode == SessionMode.ON_BREAK:
        return f"Break Time: {snapshot.formatted_time}"
    if snapshot.mode == SessionMode.WORKING:
        return f"Work Time: {snapshot.formatted_time}"
    return f"Idle: {IDLE_TIME}"


class DesktopNotifier:

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.text: str = render(SessionSnapshot(SessionMode.IDLE, IDLE_TIME))
        self.pushed: deque[str] = deque(maxlen=20)
        self._last_mode: Optional[SessionMode] = None
        self.processes = HelperProcesses()

    def __call__(self, snapshot: SessionSnapshot) -> None:
        self.text = render(snapshot)
        transition = snapshot.mode != self._last_mode
        self._last_mode = snapshot.mode
        if transition or snapshot.mode == SessionMode.IDLE:
            self.push(self.text)

    def close(self) -> None:
        self.processes.close()

    def push(self, message: str) -> bool:
        self.pushed.append(message)
        if not self.enabled:
            return False
        if sys.platform == "win32":
            return self._spawn(self._windows_command(message))
        if sys.platform == "darwin":
            return self._spawn(self._macos_command(message))
        return self._spawn(self._linux_command(message))

    # ------------------------------------------------------------------
    # Platform implementations
    # ------------------------------------------------------------------

    def _windows_command(self, message: str) -> list[str]:
        script = (
            "[reflection.assembly]::loadwithpartialname('System.Windows.Forms') | Out-Null; "
            "$n = New-Object System.Windows.Forms.NotifyIcon; "
            "$n.Icon = [System.Drawing.SystemIcons]::Information; $n.Visible = $true; "
            f"$n.ShowBalloonTip(5000, '{APP_TITLE}', '{message}', 'None')"
        )
        return ["powershell", "-NoProfile", "-Command", script]

    def _macos_command(self, message: str) -> list[str]:
        return ["osascript", "-e", f'display notification "{message}" with title "{APP_TITLE}"']

    def _linux_command(self, message: str) -> list[str]:
        return ["notify-send", "--app-name", APP_TITLE, APP_TITLE, message]

    def _spawn(self, command: list[str]) -> bool:
        if shutil.which(command[0]) is None:
            logger.debug("Notification tool %s not available", command[0])
            return False
        try:
            self.processes.launch(command)
            return True
        except OSError:
            logger.warning("Could not launch %s for a notification", command[0], exc_info=True)
            return False
