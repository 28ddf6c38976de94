"""
Shared pytest fixtures and configuration.

FakeClock drives the scheduler deterministically: each call to sleep() blocks
until the test releases a tick, then advances the fake monotonic time by the
requested delay plus any injected extra delay.
"""

from __future__ import annotations

import asyncio

import pytest

from rhythmwatch.config import Config
from rhythmwatch.timer.controller import SessionController
from rhythmwatch.timer.events import SessionEvents
from rhythmwatch.timer.scheduler import TimerScheduler
from rhythmwatch.timer.store import JsonSessionStore


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self._now = start
        self.pending = 0
        self.parked = False
        self.extra_delays: list[float] = []   # added to the next sleeps, in order
        self.sleeps: list[float] = []
        self._released: asyncio.Event | None = None

    def now(self) -> float:
        return self._now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        if self._released is None:
            self._released = asyncio.Event()
        while self.pending <= 0:
            self.parked = True
            self._released.clear()
            try:
                await self._released.wait()
            finally:
                self.parked = False
        self.pending -= 1
        extra = self.extra_delays.pop(0) if self.extra_delays else 0.0
        self._now += seconds + extra

    def release(self, ticks: int) -> None:
        self.pending += ticks
        if self._released is not None:
            self._released.set()


async def pump(clock: FakeClock, scheduler: TimerScheduler, ticks: int = 0) -> None:
    """Let *ticks* sleeps complete and wait until the loop is parked or finished."""
    clock.release(ticks)
    for _ in range(1000):
        await asyncio.sleep(0)
        if clock.pending == 0 and (clock.parked or not scheduler.running):
            return
    raise AssertionError("tick loop did not settle")


class Recorder:
    """Collects change events and signals from a SessionEvents bus."""

    def __init__(self, events: SessionEvents):
        self.snapshots = []
        self.signals = []
        events.subscribe(self.snapshots.append)
        events.subscribe_signals(self.signals.append)

    @property
    def times(self) -> list[str]:
        return [s.formatted_time for s in self.snapshots]


# ── Fixtures ────────────────────────────────────────────────────────────────

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(tmp_path):
    return JsonSessionStore(tmp_path / "session.json")


@pytest.fixture
def events():
    return SessionEvents()


@pytest.fixture
def recorder(events):
    return Recorder(events)


@pytest.fixture
def scheduler(store, events, clock):
    return TimerScheduler(store, events, clock=clock)


@pytest.fixture
async def running_scheduler(scheduler):
    """A scheduler whose loop is torn down after the test."""
    yield scheduler
    await scheduler.shutdown()


@pytest.fixture
async def controller(scheduler, store, events):
    ctl = SessionController(scheduler, store, events)
    yield ctl
    await ctl.shutdown()


@pytest.fixture
def app_config(tmp_path):
    return Config(
        data_dir=tmp_path / "data",
        desktop_notifications=False,
        sounds_enabled=False,
        sounds_dir=tmp_path / "sounds",
    )
