"""
Sound Player — plays the short cue for each session signal.

Looks for ``<sounds_dir>/<signal>.wav`` (welcome.wav, interval.wav,
break-over.wav) and hands it to the platform player in a detached process.
"""

from __future__ import annotations

import logging
import shutil
import sys
from collections import deque
from pathlib import Path
from typing import Optional

from ..timer.events import Signal
from .processes import HelperProcesses

logger = logging.getLogger(__name__)


class SoundPlayer:

    def __init__(self, sounds_dir: Path, enabled: bool = True):
        self.sounds_dir = Path(sounds_dir)
        self.enabled = enabled
        self.played: deque[Signal] = deque(maxlen=20)
        self.processes = HelperProcesses()

    def __call__(self, signal: Signal) -> None:
        self.play(signal)

    def close(self) -> None:
        self.processes.close()

    def sound_path(self, signal: Signal) -> Path:
        return self.sounds_dir / f"{signal.value}.wav"

    def play(self, signal: Signal) -> bool:
        self.played.append(signal)
        if not self.enabled:
            return False
        path = self.sound_path(signal)
        if not path.exists():
            logger.warning("No sound file for %s at %s", signal.value, path)
            return False
        command = self._command(path)
        if command is None:
            logger.warning("No audio player available for %s", sys.platform)
            return False
        try:
            self.processes.launch(command)
            return True
        except OSError:
            logger.warning("Could not play %s", path, exc_info=True)
            return False

    def _command(self, path: Path) -> Optional[list[str]]:
        if sys.platform == "win32":
            return [
                "powershell", "-NoProfile", "-Command",
                f"(New-Object Media.SoundPlayer '{path}').PlaySync()",
            ]
        if sys.platform == "darwin":
            return ["afplay", str(path)]
        for player in ("paplay", "aplay"):
            if shutil.which(player):
                return [player, str(path)]
        return None
