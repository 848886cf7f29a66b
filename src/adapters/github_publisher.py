"""Review sink adapter backed by the GitHub REST API.

Implements the core ReviewSinkPort: issue comments for the "no match" case
and a single review carrying every inline comment otherwise.
"""

from __future__ import annotations

from typing import Sequence

from adapters.github_api import GitHubClient
from adapters.github_mapper import PullRequestRef, review_comment_payload
from core.models import ReviewComment, ReviewEvent


class GitHubReviewPublisher:
    """Publishes comments and reviews on one pull request."""

    def __init__(self, client: GitHubClient, pull_request: PullRequestRef) -> None:
        self._client = client
        self._pull_request = pull_request

    def post_comment(self, body: str) -> None:
        """Post an issue-level comment on the pull request."""

        self._client.create_issue_comment(self._pull_request.number, body)

    def submit_review(self, comments: Sequence[ReviewComment], event: ReviewEvent, body: str) -> None:
        """Create one review holding all inline comments."""

        self._client.create_review(
            self._pull_request.number,
            commit_id=self._pull_request.head_sha,
            event=event.value,
            body=body,
            comments=[review_comment_payload(comment) for comment in comments],
        )
