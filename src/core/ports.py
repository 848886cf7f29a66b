"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for fetching a change and publishing a
review so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import List, Protocol, Sequence

from core.models import ExistingAnnotation, ReviewComment, ReviewEvent


class ChangeSourcePort(Protocol):
    """Read operations required by the core pipeline."""

    def fetch_diff(self) -> str:
        ...

    def fetch_existing_annotations(self) -> List[ExistingAnnotation]:
        ...


class ReviewSinkPort(Protocol):
    """Write operations required by the core pipeline."""

    def post_comment(self, body: str) -> None:
        ...

    def submit_review(self, comments: Sequence[ReviewComment], event: ReviewEvent, body: str) -> None:
        ...
