"""
Timer Scheduler — owns the SessionState and runs the single drift-corrected
tick loop for the active Working or OnBreak run.

Instead of chaining fixed one-second sleeps (which accumulates the loop's own
latency), every iteration sleeps until the next whole-second boundary measured
from the loop start on the monotonic clock. After a long suspension the next
tick reads the real gap from the clock, so one tick may advance the counter by
more than a second.

Only this class mutates the state. Every start/reset cancels the previous loop
and awaits its termination before touching anything, so a late tick can never
overwrite a newer transition.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Optional

from .clock import Clock, MonotonicClock
from .events import SessionEvents, Signal
from .state import SessionMode, SessionSnapshot, SessionState
from .store import JsonSessionStore

logger = logging.getLogger(__name__)

INTERVAL_MARK_SECONDS = 1800


class TimerScheduler:

    def __init__(
        self,
        store: JsonSessionStore,
        events: SessionEvents,
        clock: Optional[Clock] = None,
        interval_mark_seconds: int = INTERVAL_MARK_SECONDS,
    ):
        self._store = store
        self._events = events
        self._clock: Clock = clock or MonotonicClock()
        self._interval_mark_seconds = interval_mark_seconds
        self._task: Optional[asyncio.Task] = None
        self._resumed = False
        self.state = SessionState.idle()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def snapshot(self) -> SessionSnapshot:
        return self.state.snapshot()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def start_work(self) -> None:
        """(Re)start a Working run from zero, interrupting whatever is active."""
        logger.info("Work started")
        await self._begin_work(SessionState.working())

    async def start_break(self, duration_seconds: int) -> None:
        """Count down a break of *duration_seconds* (the banked work time)."""
        await self._cancel_loop()
        duration = max(0, int(duration_seconds))
        if duration == 0:
            logger.info("Zero-length break requested; session goes idle")
            self._become_idle()
            return
        logger.info("Break started: %ss", duration)
        self.state = SessionState.on_break(duration)
        self._launch()

    async def reset(self) -> None:
        """Stop the loop (awaiting its exit), zero everything, publish 00:00:00."""
        await self._cancel_loop()
        logger.info("Session reset")
        self._become_idle()

    async def resume(self, persisted: SessionState) -> None:
        """Pick up a persisted session once at startup. Downtime is not caught up."""
        if self._resumed:
            logger.warning("resume() called twice; ignoring")
            return
        self._resumed = True

        if persisted.mode == SessionMode.WORKING:
            logger.info("Resuming work at %s", persisted.formatted_time)
            await self._begin_work(
                SessionState.working(persisted.elapsed_seconds, persisted.interval_marks)
            )
        elif persisted.mode == SessionMode.ON_BREAK:
            logger.info("Resuming break at %s", persisted.formatted_time)
            if persisted.remaining_seconds == 0:
                await self._cancel_loop()
                self._finish_break()
                return
            await self.start_break(persisted.remaining_seconds)
        else:
            self.state = SessionState.idle()
            self._events.publish(self.state.snapshot())

    async def shutdown(self) -> None:
        """Teardown: stop the loop but keep the state, and save it for next launch."""
        await self._cancel_loop()
        self._persist()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _begin_work(self, state: SessionState) -> None:
        await self._cancel_loop()
        self.state = state
        self._launch()

    def _launch(self) -> None:
        self.state.last_tick_monotonic = self._clock.now()
        self._commit()
        self._task = asyncio.create_task(self._run(), name=f"rhythmwatch-{self.state.mode.value}")
        self._task.add_done_callback(self._on_loop_done)

    async def _cancel_loop(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    @staticmethod
    def _on_loop_done(task: asyncio.Task) -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.error("Tick loop crashed", exc_info=task.exception())

    async def _run(self) -> None:
        mode = self.state.mode
        loop_start = self.state.last_tick_monotonic   # set by _launch()
        base = self.state.seconds
        accounted = 0

        while True:
            elapsed_ms = (self._clock.now() - loop_start) * 1000
            target_ms = math.floor(elapsed_ms / 1000 + 1) * 1000
            delay_ms = target_ms - elapsed_ms
            if delay_ms > 0:
                await self._clock.sleep(delay_ms / 1000)

            now = self._clock.now()
            seconds = int(now - loop_start)
            if seconds <= accounted:
                continue   # woke before the boundary
            accounted = seconds
            self.state.last_tick_monotonic = now

            if mode == SessionMode.WORKING:
                self.state.elapsed_seconds = base + seconds
                self._commit()
                self._emit_interval_marks()
            else:
                self.state.remaining_seconds = max(0, base - seconds)
                self._commit()
                if self.state.remaining_seconds == 0:
                    self._finish_break()
                    return

    def _emit_interval_marks(self) -> None:
        while self.state.elapsed_seconds >= (self.state.interval_marks + 1) * self._interval_mark_seconds:
            self.state.interval_marks += 1
            logger.info("Interval mark %d reached", self.state.interval_marks)
            self._events.signal(Signal.INTERVAL)

    def _finish_break(self) -> None:
        logger.info("Break over")
        self._become_idle()
        self._events.signal(Signal.BREAK_OVER)

    def _become_idle(self) -> None:
        self.state = SessionState.idle()
        self._commit()

    def _commit(self) -> None:
        # persistence for a tick is issued before its public event
        self._persist()
        self._events.publish(self.state.snapshot())

    def _persist(self) -> None:
        try:
            self._store.save(self.state)
        except OSError:
            logger.exception("Could not persist session state to %s", self._store.path)
