"""GitHub REST API client.

A small blocking client over urllib; the action makes a handful of
sequential calls per run, so nothing here needs to be asynchronous.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from typing import Any, Optional

LOGGER = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
JSON_MEDIA_TYPE = "application/vnd.github+json"
DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"
PAGE_SIZE = 100


class GitHubApiError(RuntimeError):
    """Raised when the API answers with a non-success status."""

    def __init__(self, status: int, method: str, url: str, body: str) -> None:
        super().__init__(f"GitHub API error {status} on {method} {url}: {body}")
        self.status = status


class GitHubClient:
    """Repository-scoped client for the few endpoints diffscope needs."""

    def __init__(
        self,
        token: str,
        repository: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
    ) -> None:
        owner, _, repo = repository.partition("/")
        if not owner or not repo:
            raise ValueError(f"Repository must look like 'owner/name', got {repository!r}")
        self._token = token
        self._api_url = api_url.rstrip("/")
        self._repo_path = f"/repos/{owner}/{repo}"
        self._timeout = timeout

    def _request(
        self,
        method: str,
        path: str,
        payload: Optional[dict] = None,
        accept: str = JSON_MEDIA_TYPE,
    ) -> str:
        url = f"{self._api_url}{self._repo_path}{path}"
        data = json.dumps(payload).encode("utf-8") if payload is not None else None
        request = urllib.request.Request(url, data=data, method=method)
        request.add_header("Accept", accept)
        request.add_header("Authorization", f"Bearer {self._token}")
        request.add_header("X-GitHub-Api-Version", "2022-11-28")
        request.add_header("User-Agent", "diffscope")
        if data is not None:
            request.add_header("Content-Type", "application/json")
        LOGGER.debug("%s %s", method, url)
        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                return response.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace")
            raise GitHubApiError(e.code, method, url, body) from e

    def _request_json(self, method: str, path: str, payload: Optional[dict] = None) -> Any:
        text = self._request(method, path, payload)
        return json.loads(text) if text else None

    def get_pull_request_diff(self, number: int) -> str:
        return self._request("GET", f"/pulls/{number}", accept=DIFF_MEDIA_TYPE)

    def list_review_comments(self, number: int) -> list[dict]:
        """Return every inline review comment, following pagination."""

        comments: list[dict] = []
        page = 1
        while True:
            batch = self._request_json("GET", f"/pulls/{number}/comments?per_page={PAGE_SIZE}&page={page}")
            if not batch:
                break
            comments.extend(batch)
            if len(batch) < PAGE_SIZE:
                break
            page += 1
        return comments

    def create_issue_comment(self, number: int, body: str) -> dict:
        return self._request_json("POST", f"/issues/{number}/comments", {"body": body})

    def create_review(
        self,
        number: int,
        commit_id: str,
        event: str,
        body: str,
        comments: list[dict],
    ) -> dict:
        payload: dict[str, Any] = {"commit_id": commit_id, "event": event, "comments": comments}
        if body:
            payload["body"] = body
        return self._request_json("POST", f"/pulls/{number}/reviews", payload)
