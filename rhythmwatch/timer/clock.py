"""
Clock — monotonic time source used for all duration math.

Wall-clock time is never used for elapsed-time arithmetic because it can
jump (timezone changes, manual edits, NTP sync).
"""

from __future__ import annotations

import asyncio
import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> float:
        """Monotonic reading in seconds."""
        ...

    async def sleep(self, seconds: float) -> None:
        ...


class MonotonicClock:
    """Default clock backed by ``time.monotonic`` and ``asyncio.sleep``."""

    def now(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
