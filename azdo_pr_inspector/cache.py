"""TTL-based cache of pull request lists on top of a key-value store."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional
from urllib.parse import quote

from .models import CacheEntry, PullRequest, utcnow
from .store import KeyValueStore

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "pullRequestsCache:"
DEFAULT_CACHE_TTL = 2 * 60 * 60  # 2 hours


class CacheManager:
    """A TTL cache for pull request lists.

    Expiry is lazy: stale entries are removed by the read that finds them or
    by an explicit sweep. Reads never extend an entry's lifetime. Every
    failure is logged and treated as a miss, so callers never see cache
    errors.
    """

    def __init__(
        self,
        store: KeyValueStore,
        ttl: int = DEFAULT_CACHE_TTL,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._store = store
        self._ttl = timedelta(seconds=int(ttl))
        self._clock = clock

    @staticmethod
    def compute_key(
        organization: str, project: str, repository: str, day_range: int
    ) -> str:
        """Build the store key for a parameter tuple.

        Each part is percent-encoded with no safe characters, so the '/'
        separator can never appear inside a part and distinct tuples never
        share a key.
        """
        parts = (organization, project, repository, str(day_range))
        return CACHE_KEY_PREFIX + "/".join(quote(p, safe="") for p in parts)

    def _is_expired(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.cached_at >= self._ttl

    async def _remove(self, key: str) -> None:
        try:
            await self._store.remove_item(key)
        except Exception as e:
            logger.warning("Failed to remove cache entry %s: %s", key, e)

    async def read(
        self, organization: str, project: str, repository: str, day_range: int
    ) -> Optional[List[PullRequest]]:
        """Return the cached list if present and fresh, else None."""
        key = self.compute_key(organization, project, repository, day_range)
        try:
            raw = await self._store.get_item(key)
        except Exception as e:
            logger.debug("Cache read failed for %s: %s", key, e)
            return None
        if raw is None:
            logger.debug("Cache miss for %s", key)
            return None
        try:
            entry = CacheEntry.model_validate_json(raw)
        except ValueError as e:
            logger.debug("Discarding unparsable cache entry %s: %s", key, e)
            await self._remove(key)
            return None
        if self._is_expired(entry):
            logger.debug(
                "Cache entry %s expired at %s", key, entry.cached_at + self._ttl
            )
            await self._remove(key)
            return None
        logger.debug("Cache hit for %s (%d pull requests)", key, len(entry.data))
        return list(entry.data)

    async def write(
        self,
        organization: str,
        project: str,
        repository: str,
        day_range: int,
        data: List[PullRequest],
    ) -> None:
        """Cache data for the tuple, replacing any previous entry."""
        key = self.compute_key(organization, project, repository, day_range)
        entry = CacheEntry(
            data=list(data),
            cached_at=self._clock(),
            organization=organization,
            project=project,
            repository=repository,
            day_range=day_range,
        )
        try:
            await self._store.set_item(key, entry.model_dump_json(by_alias=True))
        except Exception as e:
            logger.warning("Failed to write cache entry %s: %s", key, e)

    async def invalidate(
        self, organization: str, project: str, repository: str, day_range: int
    ) -> None:
        """Drop the entry for the tuple regardless of its age."""
        key = self.compute_key(organization, project, repository, day_range)
        logger.debug("Invalidating cache entry %s", key)
        await self._remove(key)

    async def sweep_expired(self) -> int:
        """Delete every stale or unparsable cache entry.

        Returns:
            Number of entries removed.
        """
        try:
            items = await self._store.all_items()
        except Exception as e:
            logger.debug("Cache sweep skipped, store listing failed: %s", e)
            return 0

        removed = 0
        for key, raw in items.items():
            if not key.startswith(CACHE_KEY_PREFIX):
                continue
            try:
                entry = CacheEntry.model_validate_json(raw)
            except ValueError:
                logger.debug("Sweeping corrupt cache entry %s", key)
                await self._remove(key)
                removed += 1
                continue
            if self._is_expired(entry):
                await self._remove(key)
                removed += 1
        if removed:
            logger.debug("Swept %d expired cache entries", removed)
        return removed
