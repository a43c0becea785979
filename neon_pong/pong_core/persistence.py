"""
High Score Persistence
======================

The core only needs an opaque string key-value store. Reads and writes are
best-effort: a failed read means "no prior high score" and a failed write
is dropped after a warning.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal string store: ``get`` returns None for a missing key."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """In-process store, handy for tests and headless runs."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """
    Store backed by a flat JSON object on disk.

    The file is re-read on every ``get`` and rewritten on every ``set``, so
    several processes sharing it see last-writer-wins semantics.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        with open(self._path, "r") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {self._path}")
        return {str(k): str(v) for k, v in data.items()}

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except ValueError as e:
            logger.warning("Overwriting unreadable score file %s: %s", self._path, e)
            data = {}
        data[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w") as f:
            json.dump(data, f, indent=2, sort_keys=True)


class HighScoreStore:
    """
    Reads and writes the high score as a decimal string under a fixed key.

    Writes only happen when a score beats the last value this object read
    or wrote. Writing is monotonic within one process but a shared backing
    store is last-writer-wins across processes.
    """

    def __init__(self, store: Optional[KeyValueStore], key: str):
        """
        Args:
            store: Backing store. None disables persistence.
            key: Key the high score is stored under.
        """
        self._store = store
        self._key = key
        self._known: int = 0

    @property
    def key(self) -> str:
        return self._key

    @property
    def known_high_score(self) -> int:
        return self._known

    def load(self) -> int:
        """Read the stored high score, 0 if absent or unreadable."""
        if self._store is None:
            return self._known

        try:
            raw = self._store.get(self._key)
        except Exception as e:  # backing stores raise their own error types
            logger.warning("Could not read high score from store: %s", e)
            return self._known

        if raw is None:
            return self._known

        try:
            value = int(raw)
        except (TypeError, ValueError):
            logger.warning("Ignoring unparsable stored high score %r", raw)
            return self._known

        self._known = max(self._known, max(0, value))
        return self._known

    def save_if_higher(self, score: int) -> bool:
        """
        Persist ``score`` if it beats the known high score.

        Returns:
            True if a write was attempted and succeeded.
        """
        if score <= self._known:
            return False

        self._known = score
        if self._store is None:
            return False

        try:
            self._store.set(self._key, str(score))
        except Exception as e:
            logger.warning("Could not write high score %d: %s", score, e)
            return False
        return True
