"""
Central configuration for the RhythmWatch timer service.
All values can be overridden via environment variables or a local config.json.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

_ROOT = Path(__file__).parent.parent
_CONFIG_FILE = _ROOT / "config.json"


def _coerce(current, raw: str):
    if isinstance(current, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(current, Path):
        return Path(raw)
    return type(current)(raw)


@dataclass
class Config:
    # API
    api_host: str = "127.0.0.1"
    api_port: int = 8766

    # Storage
    data_dir: Path = field(default_factory=lambda: _ROOT / "data")
    state_file: str = "session.json"

    # Timer
    interval_mark_seconds: int = 1800    # one "interval" signal per 30 min of work

    # Sinks
    desktop_notifications: bool = True
    sounds_enabled: bool = True
    sounds_dir: Path = field(default_factory=lambda: _ROOT / "sounds")

    # Logging
    log_level: str = "info"

    def __post_init__(self):
        self.data_dir = Path(self.data_dir)
        self.sounds_dir = Path(self.sounds_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def state_path(self) -> Path:
        return self.data_dir / self.state_file

    @classmethod
    def load(cls) -> "Config":
        cfg = cls()
        if _CONFIG_FILE.exists():
            overrides = json.loads(_CONFIG_FILE.read_text())
            for k, v in overrides.items():
                if hasattr(cfg, k):
                    setattr(cfg, k, v)
        # environment variable overrides (RW_*)
        for k in cfg.__dataclass_fields__:  # type: ignore[attr-defined]
            env_key = f"RW_{k.upper()}"
            if env_key in os.environ:
                setattr(cfg, k, _coerce(getattr(cfg, k), os.environ[env_key]))
        cfg.__post_init__()
        return cfg


# Module-level singleton
config = Config.load()
