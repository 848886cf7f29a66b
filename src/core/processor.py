"""Core review pipeline.

This module is integration-agnostic. It only relies on ports for fetching the
change and publishing the review, enabling other hosts or a dry run without
changes here.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence, Tuple, Union

from core.config import ReviewConfig, ScanConfig
from core.dedup import annotation_body, is_duplicate
from core.diff_walker import iter_findings
from core.models import ExistingAnnotation, Finding, ReviewComment, ReviewEvent, ScanResult, Scope
from core.patterns import CompiledPattern
from core.ports import ChangeSourcePort, ReviewSinkPort

LOGGER = logging.getLogger(__name__)


def scan_diff(
    diff_text: Union[str, Iterable[str]],
    patterns: Sequence[CompiledPattern],
    scope: Scope = Scope.BOTH,
    existing: Sequence[ExistingAnnotation] = (),
) -> ScanResult:
    """Walk the diff once and split findings into new and already annotated.

    ``has_match`` reports whether anything matched at all, so a diff whose
    matches are all annotated already still counts as a match.
    """

    has_match = False
    duplicates = 0
    new_findings: List[Finding] = []
    for finding in iter_findings(diff_text, patterns, scope):
        has_match = True
        if is_duplicate(finding, existing):
            duplicates += 1
            LOGGER.debug("Match at %s:%s (%s) already annotated", finding.path, finding.line, finding.side.value)
            continue
        LOGGER.debug("Match at %s:%s (%s) for %r", finding.path, finding.line, finding.side.value, finding.pattern)
        new_findings.append(finding)
    return ScanResult(has_match=has_match, new_findings=tuple(new_findings), duplicate_count=duplicates)


def build_review(result: ScanResult, config: ReviewConfig) -> Tuple[List[ReviewComment], ReviewEvent, str]:
    """Turn new findings into inline comments plus the review verdict."""

    body = annotation_body(config.match_found_message)
    comments = [
        ReviewComment(path=finding.path, line=finding.line, side=finding.side, body=body)
        for finding in result.new_findings
    ]
    if config.request_changes_on_match:
        return comments, ReviewEvent.REQUEST_CHANGES, config.changes_requested_message
    return comments, ReviewEvent.COMMENT, ""


class ReviewProcessor:
    """Orchestrates fetching, scanning, dedup, and publishing."""

    def __init__(
        self,
        source: ChangeSourcePort,
        sink: ReviewSinkPort,
        scan_config: ScanConfig,
        review_config: ReviewConfig,
    ) -> None:
        self._source = source
        self._sink = sink
        self._scan = scan_config
        self._review = review_config

    def run(self) -> ScanResult:
        """Run one pass over the change and publish what is new."""

        LOGGER.debug("Fetching pull request diff ...")
        diff_text = self._source.fetch_diff()
        LOGGER.debug("Fetching existing annotations ...")
        existing = self._source.fetch_existing_annotations()

        LOGGER.debug("Parsing diff and searching for matches ...")
        result = scan_diff(diff_text, self._scan.patterns, self._scan.scope, existing)

        if not result.has_match:
            LOGGER.info("No matches found")
            self._sink.post_comment(self._review.no_match_found_message)
            return result

        if not result.new_findings:
            # Everything that matched carries an annotation from a prior run.
            LOGGER.info("%s match(es) found, all already annotated", result.duplicate_count)
            return result

        comments, event, body = build_review(result, self._review)
        self._sink.submit_review(comments, event, body)
        LOGGER.info(
            "Submitted %s review with %s comment(s), %s already annotated",
            event.value,
            len(comments),
            result.duplicate_count,
        )
        return result
