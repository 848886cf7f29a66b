"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from core.models import Scope
from core.patterns import CompiledPattern


class ConfigError(ValueError):
    """Raised for missing or invalid configuration values."""


@dataclass(frozen=True)
class ScanConfig:
    """What to look for and where."""

    patterns: Tuple[CompiledPattern, ...]
    scope: Scope = Scope.BOTH


@dataclass(frozen=True)
class ReviewConfig:
    """How findings are reported back to the pull request."""

    match_found_message: str
    no_match_found_message: str
    request_changes_on_match: bool
    changes_requested_message: str
