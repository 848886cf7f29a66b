"""Pattern compilation (core domain)."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Iterable, List


class InvalidPatternError(ValueError):
    """Raised when a configured pattern is not a valid regular expression."""

    def __init__(self, pattern: str, error: re.error) -> None:
        super().__init__(f"Invalid regex pattern {pattern!r}: {error}")
        self.pattern = pattern


@dataclass(frozen=True)
class CompiledPattern:
    """A configured pattern alongside its compiled form."""

    raw: str
    regex: re.Pattern


def split_patterns(raw_value: str) -> List[str]:
    """Split the patterns input into individual expressions.

    Newline-separated lists are preferred because commas are common inside
    regular expressions (``a{1,3}``); a single-line value is split on commas.
    """

    if not raw_value:
        return []
    separator = "\n" if "\n" in raw_value else ","
    return [part.strip() for part in raw_value.split(separator) if part.strip()]


def build_patterns(raw_patterns: Iterable[str]) -> List[CompiledPattern]:
    """Compile every pattern up front so a bad one fails before any work."""

    compiled: List[CompiledPattern] = []
    for pattern in raw_patterns:
        try:
            regex = re.compile(pattern)
        except re.error as exc:
            raise InvalidPatternError(pattern, exc) from exc
        compiled.append(CompiledPattern(raw=pattern, regex=regex))
    if not compiled:
        raise ValueError("At least one regex pattern is required")
    return compiled
