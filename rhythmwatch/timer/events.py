"""
Session event bus — fans scheduler output out to any number of passive sinks.

Two channels:
    change events  SessionSnapshot, last-value-wins (late subscribers only get
                   the current value, never history)
    signals        discrete named cues for the audio sink
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from .state import SessionSnapshot

logger = logging.getLogger(__name__)

ChangeListener = Callable[[SessionSnapshot], None]
SignalListener = Callable[["Signal"], None]


class Signal(str, Enum):
    WELCOME = "welcome"
    INTERVAL = "interval"
    BREAK_OVER = "break-over"


class SessionEvents:

    def __init__(self):
        self._listeners: list[ChangeListener] = []
        self._signal_listeners: list[SignalListener] = []
        self.latest: Optional[SessionSnapshot] = None

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscribe(self, fn: ChangeListener, replay: bool = False) -> None:
        """Register fn(snapshot); with replay=True it gets the current value now."""
        self._listeners.append(fn)
        if replay and self.latest is not None:
            self._deliver(fn, self.latest)

    def unsubscribe(self, fn: ChangeListener) -> None:
        if fn in self._listeners:
            self._listeners.remove(fn)

    def subscribe_signals(self, fn: SignalListener) -> None:
        self._signal_listeners.append(fn)

    def unsubscribe_signals(self, fn: SignalListener) -> None:
        if fn in self._signal_listeners:
            self._signal_listeners.remove(fn)

    # ------------------------------------------------------------------
    # Publishing (called by the scheduler)
    # ------------------------------------------------------------------

    def publish(self, snapshot: SessionSnapshot) -> None:
        self.latest = snapshot
        for fn in list(self._listeners):
            self._deliver(fn, snapshot)

    def signal(self, name: Signal) -> None:
        logger.debug("Signal %s", name.value)
        for fn in list(self._signal_listeners):
            self._deliver(fn, name)

    @staticmethod
    def _deliver(fn, value) -> None:
        # a broken sink must never take the tick loop down with it
        try:
            fn(value)
        except Exception:
            logger.exception("Session listener %r failed", fn)
