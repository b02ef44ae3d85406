from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol, Union


logger = logging.getLogger(__name__)

BEST_SCORE_KEY = "blockBlastBest"


class BestScoreStore(Protocol):
    def load(self) -> int: ...

    def save(self, best: int) -> None: ...


class MemoryBestScoreStore:
    """Keeps the best score in memory; useful for tests and headless runs."""

    def __init__(self, best: int = 0) -> None:
        self.best = int(best)

    def load(self) -> int:
        return self.best

    def save(self, best: int) -> None:
        self.best = int(best)


class JsonBestScoreStore:
    """Best score kept under a single key of a small JSON document.

    A missing file, malformed JSON or a non-integer value all load as 0.
    Other keys already present in the document are preserved on save.
    """

    def __init__(self, path: Union[str, Path], key: str = BEST_SCORE_KEY) -> None:
        self.path = Path(path)
        self.key = key

    def _read(self) -> dict:
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError:
            return {}
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Ignoring unreadable best score file %s: %s", self.path, exc)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Ignoring best score file %s: expected an object", self.path)
            return {}
        return payload

    def load(self) -> int:
        value = self._read().get(self.key, 0)
        try:
            return max(0, int(value))
        except (TypeError, ValueError):
            logger.warning("Ignoring non-integer best score %r in %s", value, self.path)
            return 0

    def save(self, best: int) -> None:
        payload = self._read()
        payload[self.key] = int(best)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
