"""Unified diff walker (core domain).

The walk is a fold over the input lines: ``step`` takes the current
``ParseState`` and one raw line and returns the next state together with the
classified line. Nothing is shared between calls, so a walk can be restarted
from scratch simply by calling ``walk_diff`` again.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from typing import Iterable, Iterator, Optional, Sequence, Tuple, Union

from core.diff_headers import (
    GIT_HEADER_PREFIX,
    HUNK_PREFIX,
    NEW_FILE_PREFIX,
    OLD_FILE_PREFIX,
    parse_hunk_header,
    path_from_file_marker,
    path_from_git_header,
)
from core.models import DiffLine, Finding, LineKind, ParsedLine, Scope, Side, SkippedLine
from core.patterns import CompiledPattern

LOGGER = logging.getLogger(__name__)

MALFORMED_HUNK = "malformed hunk header"
UNPARSEABLE_GIT_HEADER = "unparseable git header"
_ANOMALIES = {MALFORMED_HUNK, UNPARSEABLE_GIT_HEADER}


@dataclass(frozen=True)
class ParseState:
    """Position of the walker inside the diff."""

    path: str = ""
    old_line: int = 0
    new_line: int = 0
    old_remaining: int = 0
    new_remaining: int = 0
    # True between "diff --git" and the first hunk of that file.
    in_git_header: bool = False

    @property
    def in_hunk(self) -> bool:
        return self.old_remaining > 0 or self.new_remaining > 0


def _file_header(raw: str, path: str, *, git: bool) -> Tuple[ParseState, ParsedLine]:
    state = ParseState(path=path, in_git_header=git)
    return state, DiffLine(raw, LineKind.FILE_HEADER, state.path, 0, 0)


def _hunk_header(state: ParseState, raw: str) -> Tuple[ParseState, ParsedLine]:
    parsed = parse_hunk_header(raw)
    if parsed is None:
        return state, SkippedLine(raw, MALFORMED_HUNK)
    old_start, old_count, new_start, new_count = parsed
    state = replace(
        state,
        old_line=max(old_start - 1, 0),
        new_line=max(new_start - 1, 0),
        old_remaining=old_count,
        new_remaining=new_count,
        in_git_header=False,
    )
    return state, DiffLine(raw, LineKind.HUNK_HEADER, state.path, state.old_line, state.new_line)


def _content(state: ParseState, raw: str) -> Tuple[ParseState, ParsedLine]:
    marker = raw[:1]
    if marker == "\\":
        return state, SkippedLine(raw, "no-newline marker")
    if marker == "-":
        kind = LineKind.REMOVED
        state = replace(
            state,
            old_line=state.old_line + 1,
            old_remaining=max(state.old_remaining - 1, 0),
        )
    elif marker == "+":
        kind = LineKind.ADDED
        state = replace(
            state,
            new_line=state.new_line + 1,
            new_remaining=max(state.new_remaining - 1, 0),
        )
    else:
        kind = LineKind.CONTEXT
        state = replace(
            state,
            old_line=state.old_line + 1,
            new_line=state.new_line + 1,
            old_remaining=max(state.old_remaining - 1, 0),
            new_remaining=max(state.new_remaining - 1, 0),
        )
    return state, DiffLine(raw, kind, state.path, state.old_line, state.new_line)


def step(state: ParseState, raw: str) -> Tuple[ParseState, ParsedLine]:
    """Classify one raw diff line and return the state that follows it."""

    if raw.startswith(GIT_HEADER_PREFIX):
        path = path_from_git_header(raw)
        if path is None:
            return state, SkippedLine(raw, UNPARSEABLE_GIT_HEADER)
        return _file_header(raw, path, git=True)

    if raw.startswith(HUNK_PREFIX):
        return _hunk_header(state, raw)

    if state.in_hunk:
        return _content(state, raw)

    if raw.startswith(NEW_FILE_PREFIX):
        path = path_from_file_marker(raw)
        if state.in_git_header:
            # Refines the path announced by "diff --git"; counters stay put.
            if path is None:
                return state, SkippedLine(raw, "deleted file marker")
            return replace(state, path=path), SkippedLine(raw, "new file marker")
        if path is None:
            return state, SkippedLine(raw, "deleted file marker")
        return _file_header(raw, path, git=False)

    if raw.startswith(OLD_FILE_PREFIX):
        return state, SkippedLine(raw, "old file marker")

    if raw[:1] in ("+", "-", " ") and state.path and not state.in_git_header:
        # Counts in the hunk header ran out early; keep counting best-effort.
        return _content(state, raw)

    return state, SkippedLine(raw, "metadata")


def split_lines(diff_text: str) -> Sequence[str]:
    """Split on newlines only; form feeds and U+2028 can appear inside source lines."""

    if not diff_text:
        return []
    lines = diff_text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def walk_diff(lines: Iterable[str]) -> Iterator[ParsedLine]:
    """Yield every input line classified, in order."""

    state = ParseState()
    for raw in lines:
        state, parsed = step(state, raw)
        if isinstance(parsed, SkippedLine) and parsed.reason in _ANOMALIES:
            LOGGER.debug("Skipping %s: %r", parsed.reason, parsed.raw_text)
        yield parsed


def _side_for(kind: LineKind) -> Optional[Side]:
    if kind is LineKind.ADDED:
        return Side.RIGHT
    if kind is LineKind.REMOVED:
        return Side.LEFT
    return None


def iter_findings(
    diff_text: Union[str, Iterable[str]],
    patterns: Sequence[CompiledPattern],
    scope: Scope = Scope.BOTH,
) -> Iterator[Finding]:
    """Yield one Finding per (changed line, matching pattern) in diff order.

    Patterns are searched against the raw line, ``+``/``-`` marker included.
    """

    lines = split_lines(diff_text) if isinstance(diff_text, str) else diff_text
    for parsed in walk_diff(lines):
        if isinstance(parsed, SkippedLine):
            continue
        side = _side_for(parsed.kind)
        if side is None or not scope.includes(side):
            continue
        line_number = parsed.new_line if side is Side.RIGHT else parsed.old_line
        if line_number < 1 or not parsed.path:
            LOGGER.debug("Changed line outside a hunk ignored: %r", parsed.raw_text)
            continue
        for pattern in patterns:
            if pattern.regex.search(parsed.raw_text):
                yield Finding(
                    path=parsed.path,
                    line=line_number,
                    side=side,
                    content=parsed.raw_text,
                    pattern=pattern.raw,
                )
