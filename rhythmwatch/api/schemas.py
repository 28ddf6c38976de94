"""
Pydantic schemas for the FastAPI local API.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

# ── Commands ───────────────────────────────────────────────────────────────

class BreakRequest(BaseModel):
    time: Optional[str] = Field(
        None, description="Break length as HH:MM:SS or MM:SS; malformed or missing means 0"
    )


# ── Session State ──────────────────────────────────────────────────────────

class SessionStateOut(BaseModel):
    mode: str = Field(..., description="idle | working | on_break")
    formatted_time: str
    elapsed_seconds: int = Field(..., ge=0)
    remaining_seconds: int = Field(..., ge=0)
    interval_marks: int = Field(..., ge=0)
    running: bool


class SessionEventOut(BaseModel):
    mode: str
    formatted_time: str
