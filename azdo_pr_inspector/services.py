"""Service layer coordinating the pull request cache and data source."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

from pydantic import ValidationError

from .cache import CacheManager
from .exceptions import MalformedRecordError
from .models import PullRequest, utcnow
from .source import AZURE_DEVOPS_URL, PullRequestSource

logger = logging.getLogger(__name__)

BRANCH_PREFIX = "refs/heads/"


def strip_branch_prefix(ref_name: str) -> str:
    """'refs/heads/feature/x' -> 'feature/x'; other refs are left alone."""
    if ref_name.startswith(BRANCH_PREFIX):
        return ref_name[len(BRANCH_PREFIX) :]
    return ref_name


def build_pull_request_url(
    organization: str, project: str, repository: str, pr_id: int
) -> str:
    """Web URL of a pull request in the Azure DevOps portal."""
    org, proj, repo = (quote(p, safe="") for p in (organization, project, repository))
    return f"{AZURE_DEVOPS_URL}/{org}/{proj}/_git/{repo}/pullrequest/{pr_id}"


def normalize_pull_request(
    raw: Dict[str, Any], organization: str, project: str, repository: str
) -> PullRequest:
    """Turn a raw `az repos pr list` record into a PullRequest.

    Raises:
        MalformedRecordError: If required fields are missing or invalid.
    """
    try:
        record = dict(raw)
        record["sourceRefName"] = strip_branch_prefix(str(record["sourceRefName"]))
        record["targetRefName"] = strip_branch_prefix(str(record["targetRefName"]))
        record["url"] = build_pull_request_url(
            organization, project, repository, int(record["pullRequestId"])
        )
        return PullRequest.model_validate(record)
    except (KeyError, TypeError, ValueError, ValidationError) as e:
        pr_id = raw.get("pullRequestId", "?") if isinstance(raw, dict) else "?"
        raise MalformedRecordError(f"Malformed pull request record {pr_id}: {e}") from e


class PullRequestService:
    """Fetches pull requests, serving repeated requests from the cache.

    When constructed without a cache manager every fetch goes to the source.
    """

    def __init__(
        self,
        source: PullRequestSource,
        cache: Optional[CacheManager] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.source = source
        self.cache = cache
        self._clock = clock

    def since_date(self, day_range: int) -> date:
        """First creation date included in a look-back window of day_range days."""
        return (self._clock() - timedelta(days=day_range)).date()

    async def _fetch_from_source(
        self, organization: str, project: str, repository: str, day_range: int
    ) -> List[PullRequest]:
        records = await self.source.list_pull_requests(
            organization, project, repository, self.since_date(day_range)
        )
        return [
            normalize_pull_request(r, organization, project, repository)
            for r in records
        ]

    async def fetch(
        self,
        organization: str,
        project: str,
        repository: str,
        day_range: int,
        force_refresh: bool = False,
    ) -> List[PullRequest]:
        """Return pull requests created within the last day_range days.

        Args:
            organization: Azure DevOps organization name.
            project: Project name.
            repository: Repository name.
            day_range: Look-back window in days.
            force_refresh: Ignore and replace any cached list.

        Returns:
            Pull requests in the order the source reported them.

        Raises:
            FetchError: If the source is unavailable or returns malformed data.
        """
        if self.cache is None:
            return await self._fetch_from_source(
                organization, project, repository, day_range
            )

        if force_refresh:
            await self.cache.invalidate(organization, project, repository, day_range)
            result = None
        else:
            result = await self.cache.read(organization, project, repository, day_range)

        if result is None:
            result = await self._fetch_from_source(
                organization, project, repository, day_range
            )
            await self.cache.write(organization, project, repository, day_range, result)

        await self.cache.sweep_expired()
        return result
