"""GitHub-to-core mapping adapter.

This keeps GitHub payload details out of the core pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from core.models import ExistingAnnotation, ReviewComment, Side


@dataclass(frozen=True)
class PullRequestRef:
    """The pull request a run is attached to."""

    number: int
    head_sha: str


def pull_request_from_event(event: dict) -> Optional[PullRequestRef]:
    """Extract the pull request from a workflow event payload."""

    pull_request = event.get("pull_request") if isinstance(event, dict) else None
    if not isinstance(pull_request, dict):
        return None
    number = pull_request.get("number")
    head_sha = (pull_request.get("head") or {}).get("sha")
    if not isinstance(number, int) or not head_sha:
        return None
    return PullRequestRef(number=number, head_sha=str(head_sha))


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _optional_line(value: Any) -> Optional[int]:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    return None


def _optional_side(value: Any) -> Optional[Side]:
    try:
        return Side(str(value).upper()) if value else None
    except ValueError:
        return None


def annotation_from_payload(payload: Any) -> ExistingAnnotation:
    """Map a review comment payload; unusable fields become None.

    Outdated comments carry ``line: null`` and therefore never match.
    """

    if not isinstance(payload, dict):
        return ExistingAnnotation(body=None, path=None, line=None, side=None)
    return ExistingAnnotation(
        body=_optional_str(payload.get("body")),
        path=_optional_str(payload.get("path")),
        line=_optional_line(payload.get("line")),
        side=_optional_side(payload.get("side")),
    )


def review_comment_payload(comment: ReviewComment) -> dict:
    return {
        "path": comment.path,
        "line": comment.line,
        "side": comment.side.value,
        "body": comment.body,
    }
