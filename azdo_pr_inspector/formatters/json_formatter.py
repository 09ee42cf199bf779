"""JSON output formatter."""

import json
from typing import Any, Dict, List, Optional

from ..models import PullRequest, ViewedEntry
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Formats output as JSON using the Azure DevOps field names."""

    @staticmethod
    def _pr_payload(pr: PullRequest, viewed: bool) -> Dict[str, Any]:
        payload = pr.model_dump(mode="json", by_alias=True)
        payload["viewed"] = viewed
        return payload

    def format_pull_requests(
        self,
        pull_requests: List[PullRequest],
        viewed: Dict[str, ViewedEntry],
        **kwargs: Any,
    ) -> str:
        """Format pull requests as a JSON array, each with a ``viewed`` flag."""
        return json.dumps(
            [
                self._pr_payload(pr, str(pr.pull_request_id) in viewed)
                for pr in pull_requests
            ],
            indent=2,
            ensure_ascii=False,
        )

    def format_pull_request(
        self, pr: PullRequest, viewed_entry: Optional[ViewedEntry], **kwargs: Any
    ) -> str:
        return json.dumps(
            self._pr_payload(pr, viewed_entry is not None), indent=2, ensure_ascii=False
        )

    def format_viewed(self, viewed: Dict[str, ViewedEntry], **kwargs: Any) -> str:
        return json.dumps(
            {
                pr_id: entry.model_dump(mode="json", by_alias=True)
                for pr_id, entry in viewed.items()
            },
            indent=2,
            ensure_ascii=False,
        )
