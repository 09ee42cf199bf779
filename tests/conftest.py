"""Shared fixtures for the test suite."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import pytest

from azdo_pr_inspector.store import MemoryStore


class FakeClock:
    """Controllable replacement for utcnow()."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: Any) -> None:
        self.now += timedelta(**kwargs)


def make_raw_pr(pr_id: int = 42, **overrides: Any) -> Dict[str, Any]:
    """A record shaped like one element of `az repos pr list --output json`."""
    record: Dict[str, Any] = {
        "pullRequestId": pr_id,
        "title": f"Add feature {pr_id}",
        "createdBy": {
            "displayName": "Jamie Doe",
            "uniqueName": "jamie@contoso.com",
            "id": "b5f5a7c4-0000-0000-0000-000000000000",
        },
        "creationDate": "2026-10-15T09:30:00.123456+00:00",
        "status": "active",
        "sourceRefName": "refs/heads/feature/login",
        "targetRefName": "refs/heads/main",
        "description": "Implements the login page.",
        "reviewers": [
            {"displayName": "Alex Roe", "vote": 10, "isRequired": True},
            {"displayName": "Sam Poe", "vote": 0},
        ],
        "isDraft": False,
    }
    record.update(overrides)
    return record


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def raw_pr() -> Dict[str, Any]:
    return make_raw_pr()


@pytest.fixture
def raw_pr_factory():
    return make_raw_pr
