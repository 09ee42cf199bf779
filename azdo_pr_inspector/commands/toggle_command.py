"""Toggle-viewed command implementation."""

from __future__ import annotations

from typing import Any

from ..exceptions import PullRequestNotFoundError
from ..models import PullRequest
from .base_command import BaseCommand


class ToggleCommand(BaseCommand):
    """Command flipping the viewed state of a pull request."""

    async def execute(self, *, pr_id: int, day_range: int | None = None, **_: Any) -> str:
        await self.load(day_range)
        key = str(pr_id)

        pr = self.state.find(pr_id)
        if pr is None:
            # PRs that fell out of the window can still be unmarked
            entry = self.viewed.get(key)
            if entry is None:
                raise PullRequestNotFoundError(pr_id, self.state.day_range)
            await self.tracker.unmark(pr_id)
            self.viewed.pop(key, None)
            return f"Marked as unread: PR #{pr_id}"

        is_viewed = self.state.is_viewed(pr)
        now_viewed = await self.tracker.toggle(pr.pull_request_id, pr.title, is_viewed)
        self.state.apply_toggle(pr, now_viewed)
        return self._message(pr, now_viewed)

    @staticmethod
    def _message(pr: PullRequest, viewed: bool) -> str:
        action = "Marked as viewed" if viewed else "Marked as unread"
        return f"{action}: PR #{pr.pull_request_id}"
