"""
Session state — the mode plus the counters the scheduler advances.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SessionMode(str, Enum):
    IDLE = "idle"
    WORKING = "working"
    ON_BREAK = "on_break"


IDLE_TIME = "00:00:00"


def format_hms(seconds: int) -> str:
    """Render a second count as ``HH:MM:SS`` (hours are not wrapped)."""
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def parse_duration(text: Optional[str]) -> int:
    """
    Parse ``HH:MM:SS`` or ``MM:SS`` into seconds.

    Anything unparseable (None, wrong number of fields, non-digits) yields 0.
    """
    if not isinstance(text, str):
        return 0
    parts = text.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        return 0
    values = [int(p) for p in parts]
    if len(values) == 2:
        values.insert(0, 0)
    hours, minutes, secs = values
    return hours * 3600 + minutes * 60 + secs


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable ``{mode, formatted_time}`` value handed to observers."""
    mode: SessionMode
    formatted_time: str
    seconds: int = 0

    def to_dict(self) -> dict:
        return {"mode": self.mode.value, "formatted_time": self.formatted_time}


@dataclass
class SessionState:
    mode: SessionMode = SessionMode.IDLE
    elapsed_seconds: int = 0
    remaining_seconds: int = 0
    last_tick_monotonic: Optional[float] = None   # never persisted
    interval_marks: int = 0

    @classmethod
    def idle(cls) -> "SessionState":
        return cls()

    @classmethod
    def working(cls, elapsed_seconds: int = 0, interval_marks: int = 0) -> "SessionState":
        return cls(
            mode=SessionMode.WORKING,
            elapsed_seconds=max(0, int(elapsed_seconds)),
            interval_marks=max(0, int(interval_marks)),
        )

    @classmethod
    def on_break(cls, remaining_seconds: int) -> "SessionState":
        return cls(mode=SessionMode.ON_BREAK, remaining_seconds=max(0, int(remaining_seconds)))

    @property
    def seconds(self) -> int:
        if self.mode == SessionMode.WORKING:
            return self.elapsed_seconds
        if self.mode == SessionMode.ON_BREAK:
            return self.remaining_seconds
        return 0

    @property
    def formatted_time(self) -> str:
        return format_hms(self.seconds)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(mode=self.mode, formatted_time=self.formatted_time, seconds=self.seconds)
