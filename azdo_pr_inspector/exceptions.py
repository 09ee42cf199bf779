"""Custom exception hierarchy for Azure DevOps PR Inspector."""

from __future__ import annotations

from typing import Optional


class AzdoInspectorError(Exception):
    """Base exception for Azure DevOps PR Inspector."""


class FetchError(AzdoInspectorError):
    """Pull requests could not be fetched from the data source."""


class SourceUnavailableError(FetchError):
    """The Azure CLI is missing, not logged in, or failed to run."""

    def __init__(self, message: str, returncode: Optional[int] = None):
        self.returncode = returncode
        super().__init__(message)


class MalformedRecordError(FetchError):
    """The data source returned output that could not be parsed."""


class StoreError(AzdoInspectorError):
    """Reading or writing the persistent key-value store failed."""


class PullRequestNotFoundError(AzdoInspectorError):
    """No pull request with the requested id in the fetched window."""

    def __init__(self, pr_id: int, day_range: Optional[int] = None):
        self.pr_id = pr_id
        self.day_range = day_range
        message = f"Pull request #{pr_id} not found"
        if day_range:
            message += f" in the last {day_range} days"
        super().__init__(message)
