"""Viewed command implementation."""

from __future__ import annotations

from typing import Any

from .base_command import BaseCommand


class ViewedCommand(BaseCommand):
    """Command listing tracked viewed pull requests across repositories."""

    async def execute(self, output_format: str = "table", **_: Any) -> str:
        viewed = await self.tracker.get_all()
        return self._formatter(output_format).format_viewed(viewed)
