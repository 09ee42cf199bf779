"""Base class shared by the CLI command implementations."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..config import Config
from ..exceptions import FetchError, PullRequestNotFoundError
from ..formatters import JsonFormatter, TableFormatter
from ..models import PullRequest, ViewedEntry
from ..services import PullRequestService
from ..state import PullRequestListState
from ..viewed import ViewedTracker

logger = logging.getLogger(__name__)


class BaseCommand:
    """Holds the collaborators every command needs."""

    def __init__(
        self,
        config: Config,
        service: PullRequestService,
        tracker: ViewedTracker,
        table_formatter: TableFormatter,
        json_formatter: JsonFormatter,
        state: Optional[PullRequestListState] = None,
    ) -> None:
        self.config = config
        self.service = service
        self.tracker = tracker
        self.table_formatter = table_formatter
        self.json_formatter = json_formatter
        self.state = state or PullRequestListState(day_range=config.day_range)

    def _formatter(self, output_format: str) -> Any:
        if output_format.lower() == "json":
            return self.json_formatter
        return self.table_formatter

    async def load(
        self, day_range: Optional[int] = None, force_refresh: bool = False
    ) -> bool:
        """Fetch pull requests and viewed state into self.state.

        Returns:
            False if a newer load superseded this one and the result was dropped.

        Raises:
            FetchError: If the pull requests could not be fetched. Previously
                loaded pull requests stay in the state.
        """
        sequence = self.state.begin_request(day_range or self.state.day_range)
        try:
            pull_requests = await self.service.fetch(
                self.config.organization,
                self.config.project,
                self.config.repository,
                self.state.day_range,
                force_refresh=force_refresh,
            )
        except FetchError as e:
            self.state.apply_error(sequence, e)
            raise
        viewed = await self.tracker.get_all()
        applied = self.state.apply_result(sequence, pull_requests, viewed)
        if not applied:
            logger.debug("Dropped superseded result for request %d", sequence)
        return applied

    def require(self, pr_id: int) -> PullRequest:
        pr = self.state.find(pr_id)
        if pr is None:
            raise PullRequestNotFoundError(pr_id, self.state.day_range)
        return pr

    @property
    def viewed(self) -> Dict[str, ViewedEntry]:
        return self.state.viewed

    def visible(self) -> List[PullRequest]:
        return self.state.visible()
