"""Table output formatter using Rich."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.table import Table

from ..models import PullRequest, PullRequestStatus, Reviewer, ViewedEntry
from .base import BaseFormatter

STATUS_EMOJI = {
    PullRequestStatus.ACTIVE: "🔄",
    PullRequestStatus.COMPLETED: "✅",
    PullRequestStatus.ABANDONED: "❌",
    PullRequestStatus.OTHER: "⚪",
}


class TableFormatter(BaseFormatter):
    """Formats output as Rich tables."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize the table formatter.

        Args:
            console: Rich console instance. If None, creates a new one.
        """
        self.console = console or Console(width=200)

    def format_pull_requests(
        self,
        pull_requests: List[PullRequest],
        viewed: Dict[str, ViewedEntry],
        **kwargs: Any,
    ) -> str:
        """Format pull requests as a Rich table.

        Args:
            pull_requests: PullRequest objects to format
            viewed: Viewed entries keyed by pull request id string
            **kwargs: Additional options:
                - day_range: int - Look-back window, used in title and empty message
                - repository: str - Repository name for the table title
                - hidden_count: int - Number of viewed PRs left out of the table

        Returns:
            Formatted table string
        """
        day_range = kwargs.get("day_range")
        repository = kwargs.get("repository")
        hidden_count = kwargs.get("hidden_count", 0)

        if not pull_requests:
            message = "No pull requests found"
            if day_range:
                message += f" in the last {day_range} days"
            with self.console.capture() as capture:
                self.console.print(f"[dim]{message}[/dim]")
                if hidden_count:
                    self.console.print(f"[dim]({hidden_count} viewed hidden)[/dim]")
            return capture.get()

        title = "Pull Requests"
        if repository:
            title += f" in {repository}"
        if day_range:
            title += f" (last {day_range} days)"

        table = Table(title=title, box=box.SIMPLE_HEAVY)
        table.add_column("", justify="center", width=1)
        table.add_column("St", justify="center", no_wrap=True)
        table.add_column("ID", style="cyan", justify="right", no_wrap=True)
        table.add_column(
            "Title", style="white", no_wrap=False, overflow="ellipsis", max_width=70
        )
        table.add_column("Author", no_wrap=True)
        table.add_column("Created", no_wrap=True)

        for pr in pull_requests:
            is_viewed = str(pr.pull_request_id) in viewed
            table.add_row(
                "[green]✓[/green]" if is_viewed else "",
                STATUS_EMOJI[pr.status],
                f"#{pr.pull_request_id}",
                f"[dim]{escape(pr.title)}[/dim]" if is_viewed else escape(pr.title),
                escape(pr.created_by.display_name),
                self._fmt_date(pr.creation_date),
            )

        with self.console.capture() as capture:
            self.console.print(table)
            if hidden_count:
                self.console.print(f"[dim]{hidden_count} viewed pull request(s) hidden[/dim]")
        return capture.get()

    def format_pull_request(
        self, pr: PullRequest, viewed_entry: Optional[ViewedEntry], **kwargs: Any
    ) -> str:
        """Format a single pull request as a rendered Markdown detail view."""
        with self.console.capture() as capture:
            self.console.print(Markdown(self.detail_markdown(pr, viewed_entry)))
        return capture.get()

    def format_viewed(self, viewed: Dict[str, ViewedEntry], **kwargs: Any) -> str:
        if not viewed:
            with self.console.capture() as capture:
                self.console.print("[dim]No viewed pull requests[/dim]")
            return capture.get()

        table = Table(title="Viewed Pull Requests", box=box.SIMPLE_HEAVY)
        table.add_column("ID", style="cyan", justify="right", no_wrap=True)
        table.add_column("Title", no_wrap=False, overflow="ellipsis", max_width=70)
        table.add_column("Viewed", no_wrap=True)

        ordered = sorted(viewed.items(), key=lambda kv: kv[1].viewed_at, reverse=True)
        for pr_id, entry in ordered:
            table.add_row(
                f"#{pr_id}", escape(entry.pr_title), self._fmt_date(entry.viewed_at)
            )

        with self.console.capture() as capture:
            self.console.print(table)
        return capture.get()

    def detail_markdown(
        self, pr: PullRequest, viewed_entry: Optional[ViewedEntry] = None
    ) -> str:
        """Markdown source for the detail view."""
        lines = [
            f"# {STATUS_EMOJI[pr.status]} {pr.title}",
            "",
            f"**Pull Request #{pr.pull_request_id}**",
            "",
            f"**Status:** {pr.status.value}  ",
            f"**Created by:** {pr.created_by.display_name}  ",
            f"**Created:** {self._fmt_date(pr.creation_date)}  ",
            f"**Source:** {pr.source_ref_name} → {pr.target_ref_name}  ",
        ]
        if viewed_entry is not None:
            lines.append(f"**Viewed:** {self._fmt_date(viewed_entry.viewed_at)}  ")
        lines += ["", "## Description", pr.description or "No description provided"]
        if pr.reviewers:
            lines += ["", "## Reviewers"]
            lines += [
                f"- {self._vote_icon(r)} {r.display_name}" for r in pr.reviewers
            ]
        if pr.url:
            lines += ["", pr.url]
        return "\n".join(lines)

    def _fmt_date(self, value: datetime) -> str:
        """Format a timestamp in local time without seconds."""
        return value.astimezone().strftime("%Y-%m-%d %H:%M")

    def _vote_icon(self, reviewer: Reviewer) -> str:
        if reviewer.approved:
            return "✅"
        if reviewer.rejected:
            return "❌"
        return "⏳"
