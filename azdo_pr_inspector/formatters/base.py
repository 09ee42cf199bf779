"""Base formatter abstract class."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..models import PullRequest, ViewedEntry


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def format_pull_requests(
        self,
        pull_requests: List[PullRequest],
        viewed: Dict[str, ViewedEntry],
        **kwargs: Any,
    ) -> str:
        """Format a list of pull requests for output.

        Args:
            pull_requests: PullRequest objects to format, in display order
            viewed: Viewed entries keyed by pull request id string
            **kwargs: Additional formatting options

        Returns:
            Formatted string ready for output
        """
        pass

    @abstractmethod
    def format_pull_request(
        self, pr: PullRequest, viewed_entry: Optional[ViewedEntry], **kwargs: Any
    ) -> str:
        """Format the detail view of a single pull request.

        Args:
            pr: PullRequest to format
            viewed_entry: Viewed entry for the PR, or None if not viewed
            **kwargs: Additional formatting options

        Returns:
            Formatted string ready for output
        """
        pass

    @abstractmethod
    def format_viewed(self, viewed: Dict[str, ViewedEntry], **kwargs: Any) -> str:
        """Format the tracked viewed entries."""
        pass
