"""Cache maintenance command implementation."""

from __future__ import annotations

from typing import Any

from .base_command import BaseCommand


class CacheCommand(BaseCommand):
    """Command for sweeping or clearing cached pull request lists."""

    async def execute(
        self, *, action: str, day_range: int | None = None, **_: Any
    ) -> str:
        """Execute the cache command.

        Args:
            action: 'sweep' to drop expired entries, 'clear' to drop the
                configured repository's entry for day_range.
            day_range: Window whose entry is cleared (defaults to the configured one).

        Returns:
            A one-line summary.
        """
        cache = self.service.cache
        if cache is None:
            return "Cache is disabled"

        if action == "sweep":
            removed = await cache.sweep_expired()
            return f"Removed {removed} expired cache entr{'y' if removed == 1 else 'ies'}"

        if action == "clear":
            days = day_range or self.config.day_range
            await cache.invalidate(
                self.config.organization,
                self.config.project,
                self.config.repository,
                days,
            )
            return (
                f"Cleared cached pull requests for {self.config.repository} "
                f"(last {days} days)"
            )

        raise ValueError(f"Unknown cache action: {action}")
