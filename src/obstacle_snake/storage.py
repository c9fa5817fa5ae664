# storage.py
"""Best-score persistence: a single non-negative integer under a fixed key."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Union

from .config import BEST_SCORE_KEY

logger = logging.getLogger(__name__)


def coerce_score(value: Any) -> int:
    """Return value as a non-negative int, or 0 if it is anything else."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            return 0
    if not isinstance(value, int) or value < 0:
        return 0
    return value


class MemoryBestScoreStore:
    """Keeps the best score in memory only (headless runs, tests)."""

    def __init__(self, value: int = 0):
        self.value = coerce_score(value)
        self.saves = 0

    def load(self) -> int:
        return self.value

    def save(self, value: int) -> None:
        self.value = coerce_score(value)
        self.saves += 1


class JsonBestScoreStore:
    """
    Stores {"snake-best-score": n} in a JSON file.

    Loading never fails: a missing file, unreadable file or malformed value
    all read as 0. Saving overwrites the file; I/O errors are logged and
    dropped so a broken disk never interrupts a game.
    """

    def __init__(self, path: Union[str, os.PathLike], key: str = BEST_SCORE_KEY):
        self.path = Path(path)
        self.key = key

    def load(self) -> int:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return 0
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable best score file %s: %s", self.path, e)
            return 0

        raw = data.get(self.key) if isinstance(data, dict) else None
        score = coerce_score(raw)
        if raw is not None and score == 0 and raw != 0:
            logger.warning("Malformed best score %r in %s, using 0", raw, self.path)
        return score

    def save(self, value: int) -> None:
        payload = {self.key: coerce_score(value)}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(json.dumps(payload), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            logger.warning("Failed to save best score to %s: %s", self.path, e)
