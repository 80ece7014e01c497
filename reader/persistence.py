"""Session persistence for the reader.

KeyValueFile = small durable string store (one JSON file)
HistoryStore = saves / restores the history stack under a fixed key
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from story.models import NodeId, is_node_id

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_KEY = "page_history"


class KeyValueFile:
    """String values keyed by name, stored as one JSON object on disk."""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        raw = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError(f"Store file {self._path} does not hold a JSON object")
        return raw

    def _write_all(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp.replace(self._path)

    def get(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except ValueError:
            logger.warning("Store file %s is corrupt; starting a new one", self._path)
            data = {}
        data[key] = value
        self._write_all(data)

    def remove(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)


class HistoryStore:
    """Best-effort save / load of the visited-node history."""

    def __init__(self, store: KeyValueFile, key: str = DEFAULT_HISTORY_KEY):
        self._store = store
        self._key = key

    def save_history(self, history: Iterable[NodeId]) -> bool:
        try:
            self._store.set(self._key, json.dumps(list(history)))
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Failed to save reading history: %s", exc)
            return False
        logger.debug("Saved reading history to %s", self._store.path)
        return True

    def load_history(self) -> list[NodeId] | None:
        """Return the saved history, or None when there is no usable session."""
        try:
            raw = self._store.get(self._key)
        except (OSError, ValueError) as exc:
            logger.warning("Failed to read saved history: %s", exc)
            return None
        if raw is None:
            return None

        try:
            history = json.loads(raw)
        except ValueError:
            logger.warning("Saved history under '%s' is not valid JSON; ignoring it", self._key)
            return None
        if not isinstance(history, list) or not all(is_node_id(item) for item in history):
            logger.warning("Saved history under '%s' has an unexpected shape; ignoring it", self._key)
            return None
        return history

    def clear(self) -> None:
        try:
            self._store.remove(self._key)
        except (OSError, ValueError) as exc:
            logger.warning("Failed to clear saved history: %s", exc)
