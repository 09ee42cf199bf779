"""Tracking of which pull requests the user has already looked at."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, Union

from pydantic import ValidationError

from .models import ViewedEntry, utcnow
from .store import KeyValueStore

logger = logging.getLogger(__name__)

VIEWED_PRS_KEY = "viewedPullRequests"
DEFAULT_VIEWED_TTL_DAYS = 30


class ViewedTracker:
    """Maps pull request ids to viewed metadata stored as one aggregate record.

    All repositories share the record. Entries older than the TTL are pruned
    whenever the record is loaded, and the pruned record is written back.
    """

    def __init__(
        self,
        store: KeyValueStore,
        ttl_days: int = DEFAULT_VIEWED_TTL_DAYS,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._store = store
        self._ttl = timedelta(days=int(ttl_days))
        self._clock = clock

    async def _load(self) -> Dict[str, ViewedEntry]:
        try:
            raw = await self._store.get_item(VIEWED_PRS_KEY)
        except Exception as e:
            logger.debug("Viewed state read failed: %s", e)
            return {}
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.debug("Viewed state is not valid JSON: %s", e)
            return {}
        if not isinstance(data, dict):
            return {}

        entries: Dict[str, ViewedEntry] = {}
        for pr_id, value in data.items():
            try:
                entries[str(pr_id)] = ViewedEntry.model_validate(value)
            except ValidationError:
                logger.debug("Dropping unparsable viewed entry for PR %s", pr_id)
        return entries

    async def _save(self, entries: Dict[str, ViewedEntry]) -> None:
        payload = {
            pr_id: entry.model_dump(mode="json", by_alias=True)
            for pr_id, entry in entries.items()
        }
        try:
            await self._store.set_item(VIEWED_PRS_KEY, json.dumps(payload))
        except Exception as e:
            logger.warning("Failed to save viewed pull requests: %s", e)

    async def get_all(self) -> Dict[str, ViewedEntry]:
        """Return all live viewed entries, compacting the stored record."""
        now = self._clock()
        cleaned = {
            pr_id: entry
            for pr_id, entry in (await self._load()).items()
            if now - entry.viewed_at < self._ttl
        }
        await self._save(cleaned)
        return cleaned

    async def mark_viewed(self, pr_id: Union[int, str], pr_title: str) -> None:
        entries = await self.get_all()
        entries[str(pr_id)] = ViewedEntry(viewed_at=self._clock(), pr_title=pr_title)
        await self._save(entries)

    async def unmark(self, pr_id: Union[int, str]) -> bool:
        """Forget a viewed PR. Returns True if it was tracked."""
        entries = await self.get_all()
        existed = entries.pop(str(pr_id), None) is not None
        if existed:
            await self._save(entries)
        return existed

    async def toggle(
        self, pr_id: Union[int, str], pr_title: str, is_currently_viewed: bool
    ) -> bool:
        """Flip the viewed state of a PR.

        Args:
            pr_id: Pull request identifier.
            pr_title: Title to snapshot when marking.
            is_currently_viewed: The state the caller is currently showing.

        Returns:
            The new viewed state.
        """
        entries = await self.get_all()
        key = str(pr_id)
        if is_currently_viewed:
            entries.pop(key, None)
        else:
            entries[key] = ViewedEntry(viewed_at=self._clock(), pr_title=pr_title)
        await self._save(entries)
        return not is_currently_viewed
