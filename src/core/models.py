"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class Side(str, Enum):
    """Which coordinate space of the diff a line number refers to."""

    LEFT = "LEFT"
    RIGHT = "RIGHT"


class Scope(str, Enum):
    """Which kinds of changed lines are eligible for matching."""

    BOTH = "both"
    ADDED = "added"
    REMOVED = "removed"

    @classmethod
    def parse(cls, value: str) -> "Scope":
        normalized = (value or "").strip().lower()
        if not normalized:
            return cls.BOTH
        try:
            return cls(normalized)
        except ValueError:
            choices = ", ".join(scope.value for scope in cls)
            raise ValueError(f"Unsupported diff scope: {value!r} (expected one of {choices})") from None

    def includes(self, side: Side) -> bool:
        if self is Scope.BOTH:
            return True
        if self is Scope.ADDED:
            return side is Side.RIGHT
        return side is Side.LEFT


class LineKind(str, Enum):
    FILE_HEADER = "file_header"
    HUNK_HEADER = "hunk_header"
    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"


class ReviewEvent(str, Enum):
    COMMENT = "COMMENT"
    REQUEST_CHANGES = "REQUEST_CHANGES"


@dataclass(frozen=True)
class DiffLine:
    """A classified diff line with the counters as they stand after it."""

    raw_text: str
    kind: LineKind
    path: str
    old_line: int
    new_line: int


@dataclass(frozen=True)
class SkippedLine:
    """A line the walker stepped over without touching its counters."""

    raw_text: str
    reason: str


ParsedLine = Union[DiffLine, SkippedLine]


@dataclass(frozen=True)
class Finding:
    """A single pattern match on a single diff line."""

    path: str
    line: int
    side: Side
    content: str
    pattern: str


@dataclass(frozen=True)
class ExistingAnnotation:
    """A review comment already present on the pull request.

    Every field is optional because collaborator payloads are not trusted to
    be complete; missing fields simply never match during dedup.
    """

    body: Optional[str]
    path: Optional[str]
    line: Optional[int]
    side: Optional[Side]


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one pass over a diff."""

    has_match: bool
    new_findings: Tuple[Finding, ...]
    duplicate_count: int = 0


@dataclass(frozen=True)
class ReviewComment:
    """Draft of one inline review comment."""

    path: str
    line: int
    side: Side
    body: str
