"""
Session Controller — the public façade the command inlets talk to.

Commands are serialized: a command in flight (including the cancel-and-await
of the previous tick loop) finishes before the next one starts.

Usage:
    controller = SessionController(scheduler, store, events)
    await controller.start()          # load persisted record + resume
    await controller.start_work()
    await controller.start_break("00:25:00")
    await controller.reset()
    await controller.shutdown()
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Union

from .events import ChangeListener, SessionEvents, Signal
from .scheduler import TimerScheduler
from .state import SessionSnapshot, SessionState, parse_duration
from .store import JsonSessionStore

logger = logging.getLogger(__name__)


class SessionController:

    def __init__(self, scheduler: TimerScheduler, store: JsonSessionStore, events: SessionEvents):
        self._scheduler = scheduler
        self._store = store
        self._events = events
        self._lock = asyncio.Lock()
        self._started = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> SessionState:
        """Load the persisted record and resume it. Call once before any command."""
        async with self._lock:
            if not self._started:
                self._started = True
                persisted = self._store.load()
                logger.debug("Persisted session: %s %s", persisted.mode.value, persisted.formatted_time)
                await self._scheduler.resume(persisted)
            return self.state

    async def shutdown(self) -> None:
        async with self._lock:
            await self._scheduler.shutdown()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def start_work(self) -> SessionState:
        async with self._lock:
            await self._scheduler.start_work()
            self._events.signal(Signal.WELCOME)
            return self.state

    async def start_break(self, duration: Union[int, str, None]) -> SessionState:
        """Start a break; *duration* is seconds or an ``HH:MM:SS`` / ``MM:SS`` string."""
        seconds = duration if isinstance(duration, int) else parse_duration(duration)
        async with self._lock:
            await self._scheduler.start_break(seconds)
            return self.state

    async def reset(self) -> SessionState:
        async with self._lock:
            await self._scheduler.reset()
            return self.state

    # ------------------------------------------------------------------
    # Queries / subscriptions
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        """A copy of the current state; the tick loop keeps mutating the original."""
        return dataclasses.replace(self._scheduler.state)

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def snapshot(self) -> SessionSnapshot:
        return self._scheduler.snapshot()

    def subscribe(self, fn: ChangeListener, replay: bool = False) -> None:
        self._events.subscribe(fn, replay=replay)

    def unsubscribe(self, fn: ChangeListener) -> None:
        self._events.unsubscribe(fn)
