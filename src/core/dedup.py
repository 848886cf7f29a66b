"""Deduplication against annotations already on the pull request."""

from __future__ import annotations

from typing import Iterable

from core.models import ExistingAnnotation, Finding

# Hidden in rendered Markdown; marks comments created by diffscope.
SENTINEL = "<!-- diffscope -->"


def annotation_body(message: str) -> str:
    """Return the comment body for a finding, tagged with the sentinel."""

    return f"{SENTINEL}\n{message}"


def _matches(finding: Finding, annotation: ExistingAnnotation) -> bool:
    if not annotation.body or SENTINEL not in annotation.body:
        return False
    return (
        annotation.path == finding.path
        and annotation.line == finding.line
        and annotation.side == finding.side
    )


def is_duplicate(finding: Finding, annotations: Iterable[ExistingAnnotation]) -> bool:
    """Return True if a diffscope annotation already covers this position."""

    return any(_matches(finding, annotation) for annotation in annotations)
