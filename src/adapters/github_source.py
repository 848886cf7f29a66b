"""Change source adapter backed by the GitHub REST API.

Implements the core ChangeSourcePort for a single pull request.
"""

from __future__ import annotations

from typing import List

from adapters.github_api import GitHubClient
from adapters.github_mapper import PullRequestRef, annotation_from_payload
from core.models import ExistingAnnotation


class GitHubPullRequestSource:
    """Reads the diff and existing review comments of one pull request."""

    def __init__(self, client: GitHubClient, pull_request: PullRequestRef) -> None:
        self._client = client
        self._pull_request = pull_request

    def fetch_diff(self) -> str:
        return self._client.get_pull_request_diff(self._pull_request.number)

    def fetch_existing_annotations(self) -> List[ExistingAnnotation]:
        payloads = self._client.list_review_comments(self._pull_request.number)
        return [annotation_from_payload(payload) for payload in payloads]
