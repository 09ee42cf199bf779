"""Displayed pull request list state with a guard against superseded fetches."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from .config import DEFAULT_DAY_RANGE
from .models import PullRequest, ViewedEntry, utcnow


@dataclass
class PullRequestListState:
    """Snapshot of what the list view shows.

    Each fetch takes a sequence number from begin_request(); a result is only
    applied if no newer request was started in the meantime, so a slow
    response for an old day range cannot overwrite a newer one.
    """

    day_range: int = DEFAULT_DAY_RANGE
    hide_viewed: bool = False
    pull_requests: List[PullRequest] = field(default_factory=list)
    viewed: Dict[str, ViewedEntry] = field(default_factory=dict)
    error: Optional[Exception] = None
    is_loading: bool = False
    _sequence: int = field(default=0, init=False, repr=False)

    def begin_request(self, day_range: Optional[int] = None) -> int:
        if day_range is not None:
            self.day_range = day_range
        self._sequence += 1
        self.is_loading = True
        self.error = None
        return self._sequence

    def is_current(self, sequence: int) -> bool:
        return sequence == self._sequence

    def apply_result(
        self,
        sequence: int,
        pull_requests: List[PullRequest],
        viewed: Dict[str, ViewedEntry],
    ) -> bool:
        """Show a fetch result. Returns False if the request was superseded."""
        if not self.is_current(sequence):
            return False
        self.pull_requests = list(pull_requests)
        self.viewed = dict(viewed)
        self.is_loading = False
        return True

    def apply_error(self, sequence: int, error: Exception) -> bool:
        """Record a failed fetch, keeping previously shown pull requests."""
        if not self.is_current(sequence):
            return False
        self.error = error
        self.is_loading = False
        return True

    def is_viewed(self, pr: PullRequest) -> bool:
        return str(pr.pull_request_id) in self.viewed

    def apply_toggle(
        self, pr: PullRequest, viewed: bool, now: Optional[datetime] = None
    ) -> None:
        """Mirror a tracker toggle into the snapshot."""
        key = str(pr.pull_request_id)
        if viewed:
            self.viewed[key] = ViewedEntry(viewed_at=now or utcnow(), pr_title=pr.title)
        else:
            self.viewed.pop(key, None)

    def find(self, pr_id: int) -> Optional[PullRequest]:
        for pr in self.pull_requests:
            if pr.pull_request_id == pr_id:
                return pr
        return None

    def visible(self) -> List[PullRequest]:
        if not self.hide_viewed:
            return list(self.pull_requests)
        return [pr for pr in self.pull_requests if not self.is_viewed(pr)]
