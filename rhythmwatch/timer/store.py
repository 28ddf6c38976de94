"""
Session persistence — the flat JSON record that lets a session survive a
process restart.

Record layout:
    {"running": bool, "on_break": bool, "time": "HH:MM:SS"}

A missing, unreadable or incomplete record loads as Idle. Corruption means
"start fresh", never an error for the caller.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from .state import IDLE_TIME, SessionMode, SessionState, parse_duration

logger = logging.getLogger(__name__)

_FIELDS = ("running", "on_break", "time")


def to_record(state: SessionState) -> dict:
    return {
        "running": state.mode == SessionMode.WORKING,
        "on_break": state.mode == SessionMode.ON_BREAK,
        "time": state.formatted_time,
    }


def from_record(record: object, interval_mark_seconds: int = 1800) -> SessionState:
    """Rebuild a SessionState from a record; anything malformed gives Idle."""
    if not isinstance(record, dict) or any(k not in record for k in _FIELDS):
        return SessionState.idle()

    running, on_break, time_str = (record[k] for k in _FIELDS)
    if not isinstance(running, bool) or not isinstance(on_break, bool):
        return SessionState.idle()
    if not isinstance(time_str, str) or len(time_str.split(":")) != 3:
        return SessionState.idle()
    if running and on_break:
        return SessionState.idle()

    seconds = parse_duration(time_str)
    if seconds == 0 and time_str.strip() != IDLE_TIME:
        return SessionState.idle()   # unparseable time

    if running:
        # boundaries already reached were signalled before the restart
        return SessionState.working(seconds, seconds // interval_mark_seconds)
    if on_break:
        return SessionState.on_break(seconds)
    return SessionState.idle()


class JsonSessionStore:
    """Whole-record JSON file store, replaced atomically on every save."""

    def __init__(self, path: Path, interval_mark_seconds: int = 1800):
        self.path = Path(path)
        self._interval_mark_seconds = interval_mark_seconds
        self._last_written: Optional[dict] = None
        self.writes = 0

    def load(self) -> SessionState:
        try:
            if not self.path.exists():
                return SessionState.idle()
            record = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Session record at %s is unreadable; starting idle", self.path)
            return SessionState.idle()

        state = from_record(record, self._interval_mark_seconds)
        if state.mode == SessionMode.IDLE and record != to_record(state):
            logger.warning("Session record at %s is malformed; starting idle", self.path)
        else:
            self._last_written = record
        return state

    def save(self, state: SessionState) -> None:
        record = to_record(state)
        if record == self._last_written:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(record), encoding="utf-8")
        os.replace(tmp, self.path)
        self._last_written = record
        self.writes += 1
