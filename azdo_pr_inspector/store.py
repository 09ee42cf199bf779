"""Persistent string-keyed storage used by the cache and viewed-state tracker."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from .exceptions import StoreError

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Abstract async key-value store holding serialized string values.

    No transactions; a read-modify-write sequence is only safe while a single
    caller owns the store.
    """

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None if absent."""

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Delete key. Removing a missing key is not an error."""

    @abstractmethod
    async def all_items(self) -> Dict[str, str]:
        """Return a snapshot of every stored key and value."""


class MemoryStore(KeyValueStore):
    """In-process store; contents are lost when the process exits."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    async def all_items(self) -> Dict[str, str]:
        return dict(self._items)


class JsonFileStore(KeyValueStore):
    """Store backed by a single JSON object on disk.

    Every mutation rewrites the file through a temporary file and an atomic
    rename so a crash never leaves a half-written store behind.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path).expanduser()

    def _load(self, discard_corrupt: bool = False) -> Dict[str, str]:
        """Read the whole store.

        Args:
            discard_corrupt: Treat a file that is not a JSON object as empty
                instead of raising, so the next write replaces it.
        """
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise StoreError(f"Failed to read store {self.path}: {e}") from e
        except json.JSONDecodeError as e:
            if discard_corrupt:
                logger.warning("Discarding unreadable store %s: %s", self.path, e)
                return {}
            raise StoreError(f"Failed to read store {self.path}: {e}") from e
        if not isinstance(data, dict):
            if discard_corrupt:
                logger.warning("Discarding store %s: not a JSON object", self.path)
                return {}
            raise StoreError(f"Store {self.path} does not contain a JSON object")
        return {str(k): str(v) for k, v in data.items()}

    def _dump(self, items: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=".store-", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(items, f, indent=2, sort_keys=True)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StoreError(f"Failed to write store {self.path}: {e}") from e
        logger.debug("Wrote %d item(s) to %s", len(items), self.path)

    def _set(self, key: str, value: str) -> None:
        items = self._load(discard_corrupt=True)
        items[key] = value
        self._dump(items)

    def _remove(self, key: str) -> None:
        items = self._load(discard_corrupt=True)
        if key in items:
            del items[key]
            self._dump(items)

    async def get_item(self, key: str) -> Optional[str]:
        items = await asyncio.to_thread(self._load)
        return items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set, key, value)

    async def remove_item(self, key: str) -> None:
        await asyncio.to_thread(self._remove, key)

    async def all_items(self) -> Dict[str, str]:
        return await asyncio.to_thread(self._load)
