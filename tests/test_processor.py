from __future__ import annotations

from typing import List, Optional, Sequence

from core.config import ReviewConfig, ScanConfig
from core.dedup import SENTINEL, annotation_body
from core.models import ExistingAnnotation, ReviewComment, ReviewEvent, Scope, Side
from core.patterns import build_patterns
from core.processor import ReviewProcessor, build_review, scan_diff

DIFF = "\n".join(
    [
        "diff --git a/app.py b/app.py",
        "index 83db48f..bf269f4 100644",
        "--- a/app.py",
        "+++ b/app.py",
        "@@ -1,3 +1,3 @@",
        " import os",
        "-print('debug')",
        "+print('debug again')",
        " main()",
        "",
    ]
)


class FakeSource:
    def __init__(self, diff: str, existing: Optional[List[ExistingAnnotation]] = None) -> None:
        self._diff = diff
        self._existing = existing or []
        self.calls = 0

    def fetch_diff(self) -> str:
        self.calls += 1
        return self._diff

    def fetch_existing_annotations(self) -> List[ExistingAnnotation]:
        return list(self._existing)


class FakeSink:
    def __init__(self) -> None:
        self.comments: list[str] = []
        self.reviews: list[tuple[list[ReviewComment], ReviewEvent, str]] = []

    def post_comment(self, body: str) -> None:
        self.comments.append(body)

    def submit_review(self, comments: Sequence[ReviewComment], event: ReviewEvent, body: str) -> None:
        self.reviews.append((list(comments), event, body))


def _review_config(request_changes: bool = False) -> ReviewConfig:
    return ReviewConfig(
        match_found_message="Debug output found",
        no_match_found_message="All clear",
        request_changes_on_match=request_changes,
        changes_requested_message="Please remove debug output",
    )


def _processor(source: FakeSource, sink: FakeSink, patterns: List[str], **kwargs) -> ReviewProcessor:
    scope = kwargs.pop("scope", Scope.BOTH)
    return ReviewProcessor(
        source=source,
        sink=sink,
        scan_config=ScanConfig(patterns=tuple(build_patterns(patterns)), scope=scope),
        review_config=_review_config(**kwargs),
    )


def test_scan_without_matches() -> None:
    result = scan_diff(DIFF, build_patterns(["eval"]))
    assert result.has_match is False
    assert result.new_findings == ()


def test_scan_empty_diff() -> None:
    result = scan_diff("", build_patterns(["print"]))
    assert result.has_match is False
    assert result.new_findings == ()


def test_scan_collects_both_sides() -> None:
    result = scan_diff(DIFF, build_patterns([r"print\("]))
    assert result.has_match is True
    assert [(f.path, f.line, f.side) for f in result.new_findings] == [
        ("app.py", 2, Side.LEFT),
        ("app.py", 2, Side.RIGHT),
    ]


def test_all_duplicates_still_report_match() -> None:
    existing = [
        ExistingAnnotation(body=annotation_body("x"), path="app.py", line=2, side=Side.LEFT),
        ExistingAnnotation(body=annotation_body("x"), path="app.py", line=2, side=Side.RIGHT),
    ]
    result = scan_diff(DIFF, build_patterns(["print"]), Scope.BOTH, existing)
    assert result.has_match is True
    assert result.new_findings == ()
    assert result.duplicate_count == 2


def test_second_run_seeded_from_first_finds_nothing_new() -> None:
    patterns = build_patterns(["print", "debug"])
    first = scan_diff(DIFF, patterns)
    assert len(first.new_findings) == 4

    seeded = [
        ExistingAnnotation(body=annotation_body("msg"), path=f.path, line=f.line, side=f.side)
        for f in first.new_findings
    ]
    second = scan_diff(DIFF, patterns, Scope.BOTH, seeded)
    assert second.new_findings == ()
    assert second.has_match == first.has_match


def test_build_review_comment_event() -> None:
    result = scan_diff(DIFF, build_patterns(["again"]))
    comments, event, body = build_review(result, _review_config())
    assert event is ReviewEvent.COMMENT
    assert body == ""
    assert comments == [
        ReviewComment(path="app.py", line=2, side=Side.RIGHT, body=f"{SENTINEL}\nDebug output found")
    ]


def test_build_review_request_changes() -> None:
    result = scan_diff(DIFF, build_patterns(["again"]))
    _, event, body = build_review(result, _review_config(request_changes=True))
    assert event is ReviewEvent.REQUEST_CHANGES
    assert body == "Please remove debug output"


def test_run_posts_no_match_comment() -> None:
    source = FakeSource(DIFF)
    sink = FakeSink()
    result = _processor(source, sink, ["eval"]).run()

    assert result.has_match is False
    assert sink.comments == ["All clear"]
    assert sink.reviews == []
    assert source.calls == 1


def test_run_submits_single_review_for_new_findings() -> None:
    sink = FakeSink()
    _processor(FakeSource(DIFF), sink, ["print"], scope=Scope.ADDED).run()

    assert sink.comments == []
    assert len(sink.reviews) == 1
    comments, event, _ = sink.reviews[0]
    assert event is ReviewEvent.COMMENT
    assert [(c.path, c.line, c.side) for c in comments] == [("app.py", 2, Side.RIGHT)]


def test_run_requests_changes_when_configured() -> None:
    sink = FakeSink()
    _processor(FakeSource(DIFF), sink, ["print"], request_changes=True).run()

    comments, event, body = sink.reviews[0]
    assert len(comments) == 2
    assert event is ReviewEvent.REQUEST_CHANGES
    assert body == "Please remove debug output"


def test_run_is_silent_when_everything_is_annotated() -> None:
    existing = [ExistingAnnotation(body=annotation_body("x"), path="app.py", line=2, side=Side.RIGHT)]
    sink = FakeSink()
    result = _processor(FakeSource(DIFF, existing), sink, ["again"]).run()

    assert result.has_match is True
    assert result.new_findings == ()
    assert sink.comments == []
    assert sink.reviews == []


def test_run_only_submits_unannotated_findings() -> None:
    existing = [
        ExistingAnnotation(body=annotation_body("x"), path="app.py", line=2, side=Side.LEFT),
        # Same position but written by a person: does not count.
        ExistingAnnotation(body="looks fine", path="app.py", line=2, side=Side.RIGHT),
    ]
    sink = FakeSink()
    _processor(FakeSource(DIFF, existing), sink, ["print"]).run()

    comments, _, _ = sink.reviews[0]
    assert [(c.line, c.side) for c in comments] == [(2, Side.RIGHT)]
