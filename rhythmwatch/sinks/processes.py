"""
Helper processes — the notifier and player tools run detached from the event
loop. Handles are kept so finished children get reaped on the next launch and
the rest are waited on at shutdown.
"""

from __future__ import annotations

import logging
import subprocess

logger = logging.getLogger(__name__)

SHUTDOWN_TIMEOUT = 5.0


class HelperProcesses:

    def __init__(self):
        self._children: list[subprocess.Popen] = []

    def __len__(self) -> int:
        return len(self._children)

    def launch(self, command: list[str]) -> subprocess.Popen:
        """Start *command* without waiting for it. Raises OSError if it cannot start."""
        self.reap()
        child = subprocess.Popen(command, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        self._children.append(child)
        return child

    def reap(self) -> None:
        self._children = [child for child in self._children if child.poll() is None]

    def close(self, timeout: float = SHUTDOWN_TIMEOUT) -> None:
        children, self._children = self._children, []
        for child in children:
            try:
                child.wait(timeout=timeout)
            except subprocess.TimeoutExpired:
                logger.warning("%s still running at shutdown; killing it", child.args[0])
                child.kill()
                child.wait()
