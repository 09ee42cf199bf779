"""Show command implementation."""

from __future__ import annotations

from typing import Any

from .base_command import BaseCommand


class ShowCommand(BaseCommand):
    """Command showing the details of one pull request."""

    async def execute(
        self,
        *,
        pr_id: int,
        day_range: int | None = None,
        mark_viewed: bool = False,
        output_format: str = "table",
        **_: Any,
    ) -> str:
        """Execute the show command.

        Args:
            pr_id: Pull request id to show.
            day_range: Look-back window the PR must fall in.
            mark_viewed: Also mark the pull request as viewed.
            output_format: Output format ('table' or 'json').

        Returns:
            Formatted detail view.

        Raises:
            PullRequestNotFoundError: If the PR is not in the fetched window.
        """
        await self.load(day_range)
        pr = self.require(pr_id)

        if mark_viewed:
            await self.tracker.mark_viewed(pr.pull_request_id, pr.title)
            self.state.apply_toggle(pr, True)

        return self._formatter(output_format).format_pull_request(
            pr, self.viewed.get(str(pr.pull_request_id))
        )
