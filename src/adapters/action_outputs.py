"""GitHub Actions workflow outputs and commands."""

from __future__ import annotations

import uuid
from typing import Mapping, Optional

from core.models import ScanResult


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def format_error(message: str) -> str:
    """Return an ``::error::`` workflow command for the given message."""

    return f"::error::{_escape_data(message)}"


def result_outputs(result: ScanResult) -> dict[str, str]:
    return {
        "has_match": "true" if result.has_match else "false",
        "new_findings": str(len(result.new_findings)),
        "duplicate_findings": str(result.duplicate_count),
    }


def write_outputs(path: Optional[str], outputs: Mapping[str, str]) -> None:
    """Append outputs to the $GITHUB_OUTPUT file when running in Actions."""

    if not path:
        return
    with open(path, "a", encoding="utf-8") as handle:
        for name, value in outputs.items():
            if "\n" in value:
                delimiter = f"ghadelimiter_{uuid.uuid4()}"
                handle.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
            else:
                handle.write(f"{name}={value}\n")
