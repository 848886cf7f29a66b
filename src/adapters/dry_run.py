"""Review sink that logs instead of publishing."""

from __future__ import annotations

import logging
from typing import Sequence

from core.models import ReviewComment, ReviewEvent

LOGGER = logging.getLogger(__name__)


class DryRunPublisher:
    """Records what would have been published."""

    def __init__(self) -> None:
        self.comments: list[str] = []
        self.reviews: list[tuple[list[ReviewComment], ReviewEvent, str]] = []

    def post_comment(self, body: str) -> None:
        self.comments.append(body)
        LOGGER.info("[dry-run] Would comment: %s", body)

    def submit_review(self, comments: Sequence[ReviewComment], event: ReviewEvent, body: str) -> None:
        self.reviews.append((list(comments), event, body))
        LOGGER.info("[dry-run] Would submit %s review with %s comment(s)", event.value, len(comments))
        for comment in comments:
            LOGGER.info("[dry-run]   %s:%s (%s)", comment.path, comment.line, comment.side.value)
