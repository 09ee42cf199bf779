"""List command implementation."""

from __future__ import annotations

from typing import Any

from .base_command import BaseCommand


class ListCommand(BaseCommand):
    """Command for listing recent pull requests with their viewed state."""

    async def execute(
        self,
        day_range: int | None = None,
        force_refresh: bool = False,
        hide_viewed: bool = False,
        output_format: str = "table",
        **kwargs: Any,
    ) -> str:
        """Execute the list command.

        Args:
            day_range: Look-back window in days (defaults to the configured one).
            force_refresh: Bypass and replace the cached list.
            hide_viewed: Leave out pull requests already marked as viewed.
            output_format: Output format ('table' or 'json').
            **kwargs: Additional arguments.

        Returns:
            Formatted output string.
        """
        self.state.hide_viewed = hide_viewed
        await self.load(day_range, force_refresh=force_refresh)

        visible = self.visible()
        return self._formatter(output_format).format_pull_requests(
            visible,
            self.viewed,
            day_range=self.state.day_range,
            repository=self.config.repository,
            hidden_count=len(self.state.pull_requests) - len(visible),
        )
