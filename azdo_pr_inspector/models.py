"""Data models for Azure DevOps PR Inspector using Pydantic for validation."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so age arithmetic never mixes kinds."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class _CamelModel(BaseModel):
    """Base model serialized with the camelCase names used by Azure DevOps."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PullRequestStatus(str, Enum):
    """Pull request status as reported by Azure DevOps."""

    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"
    OTHER = "other"


class Author(_CamelModel):
    """Identity that created a pull request."""

    model_config = ConfigDict(frozen=True)

    display_name: str = Field(..., description="Human-readable name")
    unique_name: str = Field("", description="Unique account name (usually email)")


class Reviewer(_CamelModel):
    """A reviewer and their vote on a pull request."""

    model_config = ConfigDict(frozen=True)

    display_name: str = Field(..., description="Human-readable reviewer name")
    vote: int = Field(
        0, description="Positive approved, negative rejected, 0 pending"
    )

    @property
    def approved(self) -> bool:
        return self.vote > 0

    @property
    def rejected(self) -> bool:
        return self.vote < 0


class PullRequest(_CamelModel):
    """A pull request fetched from an Azure DevOps repository."""

    model_config = ConfigDict(frozen=True)

    pull_request_id: int = Field(
        ..., description="Identifier unique within a repository"
    )
    title: str = Field(..., description="Pull request title")
    created_by: Author = Field(..., description="Pull request author")
    creation_date: datetime = Field(..., description="Creation timestamp")
    status: PullRequestStatus = Field(
        PullRequestStatus.OTHER, description="Pull request status"
    )
    source_ref_name: str = Field(..., description="Source branch name")
    target_ref_name: str = Field(..., description="Target branch name")
    description: Optional[str] = Field(None, description="Pull request description")
    reviewers: List[Reviewer] = Field(
        default_factory=list, description="Reviewers in the order reported"
    )
    url: Optional[str] = Field(None, description="Web URL of the pull request")

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> PullRequestStatus:
        """Map unknown statuses (e.g. 'notSet', 'all') to OTHER."""
        if isinstance(v, PullRequestStatus):
            return v
        try:
            return PullRequestStatus(str(v).lower())
        except ValueError:
            return PullRequestStatus.OTHER

    @field_validator("reviewers", mode="before")
    @classmethod
    def validate_reviewers(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("creation_date")
    @classmethod
    def validate_creation_date(cls, v: datetime) -> datetime:
        return _as_utc(v)


class ViewedEntry(_CamelModel):
    """Local record that the user has looked at a pull request."""

    viewed_at: datetime = Field(..., description="When the PR was marked viewed")
    pr_title: str = Field(..., description="Title snapshot at the time of marking")

    @field_validator("viewed_at")
    @classmethod
    def validate_viewed_at(cls, v: datetime) -> datetime:
        return _as_utc(v)


class CacheEntry(_CamelModel):
    """Cached pull request list for one (org, project, repo, days) tuple."""

    data: List[PullRequest] = Field(default_factory=list, description="Cached PRs")
    cached_at: datetime = Field(..., description="When the list was cached")
    organization: str = Field(..., description="Azure DevOps organization")
    project: str = Field(..., description="Azure DevOps project")
    repository: str = Field(..., description="Repository name")
    day_range: int = Field(..., gt=0, description="Look-back window in days")

    @field_validator("cached_at")
    @classmethod
    def validate_cached_at(cls, v: datetime) -> datetime:
        return _as_utc(v)
