from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .levels import MIN_LEVEL, is_valid_level

logger = logging.getLogger(__name__)

LEVEL_KEY = "level"
STREAK_KEY = "streak"


@dataclass(frozen=True)
class SavedState:
    level: int = MIN_LEVEL
    streak: int = 0


def _coerce(raw: dict) -> SavedState:
    level = raw.get(LEVEL_KEY)
    streak = raw.get(STREAK_KEY)
    if not is_valid_level(level):
        level = MIN_LEVEL
    if not isinstance(streak, int) or isinstance(streak, bool) or streak < 0:
        streak = 0
    return SavedState(level=level, streak=streak)


class StateStore(Protocol):
    def load(self) -> SavedState: ...

    def save(self, level: int, streak: int) -> None: ...


class MemoryStore:
    def __init__(self, level: int = MIN_LEVEL, streak: int = 0) -> None:
        self.data: dict = {LEVEL_KEY: level, STREAK_KEY: streak}

    def load(self) -> SavedState:
        return _coerce(self.data)

    def save(self, level: int, streak: int) -> None:
        self.data = {LEVEL_KEY: level, STREAK_KEY: streak}


class JsonFileStore:
    """
    Keep level and streak in a small JSON file.

    A missing, unreadable or malformed file loads as the defaults; failed
    writes are logged and dropped so play never stops over storage.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> SavedState:
        if not self.path.is_file():
            return SavedState()
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("could not read state from %s: %s", self.path, e)
            return SavedState()
        if not isinstance(raw, dict):
            return SavedState()
        return _coerce(raw)

    def save(self, level: int, streak: int) -> None:
        try:
            self.path.write_text(
                json.dumps({LEVEL_KEY: level, STREAK_KEY: streak}), encoding="utf-8"
            )
        except OSError as e:
            logger.warning("could not write state to %s: %s", self.path, e)
