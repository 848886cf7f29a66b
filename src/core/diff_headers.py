"""Helpers for parsing unified-diff header lines."""

from __future__ import annotations

import re
from typing import Optional, Tuple

GIT_HEADER_PREFIX = "diff --git "
NEW_FILE_PREFIX = "+++ "
OLD_FILE_PREFIX = "--- "
HUNK_PREFIX = "@@"
DEV_NULL = "/dev/null"

_HUNK_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


def _unquote(path: str) -> str:
    """Undo git's C-style quoting for paths with unusual characters."""

    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path
    inner = path[1:-1]
    try:
        return inner.encode("latin-1", "backslashreplace").decode("unicode_escape").encode("latin-1").decode("utf-8")
    except (UnicodeDecodeError, UnicodeEncodeError):
        return inner


def _strip_prefix(path: str, prefix: str) -> str:
    path = _unquote(path)
    if path.startswith(prefix):
        return path[len(prefix):]
    return path


def path_from_git_header(line: str) -> Optional[str]:
    """Return the new-side path from a ``diff --git a/X b/Y`` line."""

    if not line.startswith(GIT_HEADER_PREFIX):
        return None
    rest = line[len(GIT_HEADER_PREFIX):].strip()

    # Quoted form: "a/x y" "b/x y"
    if rest.endswith('"'):
        start = rest.rfind(' "')
        if start != -1:
            return _strip_prefix(rest[start + 1:], "b/")

    # Unquoted paths may contain spaces, so prefer the split that yields the
    # same path on both sides before falling back to the last " b/".
    for index in range(len(rest)):
        if rest.startswith(" b/", index):
            old_path = rest[:index]
            new_path = rest[index + 1:]
            if old_path.startswith("a/") and old_path[2:] == new_path[2:]:
                return new_path[2:]
    index = rest.rfind(" b/")
    if index == -1:
        return None
    return rest[index + 3:]


def path_from_file_marker(line: str) -> Optional[str]:
    """Return the path from a ``+++ b/X`` marker, or None for /dev/null."""

    if not line.startswith(NEW_FILE_PREFIX):
        return None
    raw = line[len(NEW_FILE_PREFIX):]
    # Some tools append a tab and a timestamp after the path.
    raw = raw.split("\t", 1)[0].rstrip()
    if not raw or raw == DEV_NULL:
        return None
    return _strip_prefix(raw, "b/")


def parse_hunk_header(line: str) -> Optional[Tuple[int, int, int, int]]:
    """Split ``@@ -a,b +c,d @@`` into (a, b, c, d).

    Omitted counts default to 1, following the unified diff format.
    Returns None when the line does not follow the grammar.
    """

    match = _HUNK_RE.match(line)
    if not match:
        return None
    old_start, old_count, new_start, new_count = match.groups()
    return (
        int(old_start),
        int(old_count) if old_count is not None else 1,
        int(new_start),
        int(new_count) if new_count is not None else 1,
    )
