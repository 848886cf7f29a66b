"""Configuration loading for diffscope.

Inputs arrive the way GitHub Actions passes them (``INPUT_<NAME>``
environment variables). An optional flat JSON file can hold the same inputs
plus a logging section, so local runs do not need a dozen exports.
Environment values win over the file; the file wins over defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import os
from typing import Any, Mapping, Optional

from dotenv import load_dotenv

from adapters.github_api import DEFAULT_API_URL
from core.config import ConfigError, ReviewConfig, ScanConfig
from core.models import Scope
from core.patterns import build_patterns, split_patterns

# Looked up in the workspace when DIFFSCOPE_CONFIG is not set.
DEFAULT_CONFIG_NAME = "diffscope.json"

DEFAULTS = {
    "diff_scope": "both",
    "match_found_message": "This line matches a pattern flagged for review.",
    "no_match_found_message": "No flagged patterns found in this pull request.",
    "mark_changes_requested": "false",
    "changes_requested_message": "Changes requested: flagged patterns were found in this pull request.",
    "dry_run": "false",
}

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    """Everything a run needs, validated."""

    scan: ScanConfig
    review: ReviewConfig
    github_token: Optional[str]
    repository: Optional[str]
    event_path: Optional[str]
    api_url: str
    output_path: Optional[str]
    dry_run: bool
    debug: bool
    logging: dict = field(default_factory=dict)


def _config_path(env: Mapping[str, str]) -> Optional[str]:
    explicit = env.get("DIFFSCOPE_CONFIG")
    if explicit:
        return explicit
    workspace = env.get("GITHUB_WORKSPACE") or os.getcwd()
    candidate = os.path.join(workspace, DEFAULT_CONFIG_NAME)
    return candidate if os.path.exists(candidate) else None


def load_json_config(path: Optional[str]) -> dict:
    """Load the optional JSON config; an explicit missing path is an error."""

    if not path:
        return {}
    if not os.path.exists(path):
        raise ConfigError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Config file {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return data


def read_input(name: str, env: Mapping[str, str], config: Mapping[str, Any]) -> str:
    """Resolve one input: environment, then config file, then default."""

    env_value = env.get(f"INPUT_{name.upper()}")
    if env_value:
        return env_value
    file_value = config.get(name)
    if isinstance(file_value, list):
        return "\n".join(str(item) for item in file_value)
    if isinstance(file_value, bool):
        return "true" if file_value else "false"
    if file_value is not None:
        return str(file_value)
    return DEFAULTS.get(name, "")


def parse_bool(value: str, name: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    raise ConfigError(f"Input {name} must be 'true' or 'false', got {value!r}")


def build_scan_config(patterns_value: str, scope_value: str) -> ScanConfig:
    """Validate and compile the scan inputs, failing fast on bad values."""

    raw_patterns = split_patterns(patterns_value)
    if not raw_patterns:
        raise ConfigError("Input regex_patterns is required")
    try:
        scope = Scope.parse(scope_value)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc
    return ScanConfig(patterns=tuple(build_patterns(raw_patterns)), scope=scope)


def build_review_config(env: Mapping[str, str], config: Mapping[str, Any]) -> ReviewConfig:
    return ReviewConfig(
        match_found_message=read_input("match_found_message", env, config),
        no_match_found_message=read_input("no_match_found_message", env, config),
        request_changes_on_match=parse_bool(
            read_input("mark_changes_requested", env, config), "mark_changes_requested"
        ),
        changes_requested_message=read_input("changes_requested_message", env, config),
    )


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment (and .env) plus the JSON file."""

    if env is None:
        load_dotenv()
        env = os.environ
    config = load_json_config(_config_path(env))

    scan = build_scan_config(
        read_input("regex_patterns", env, config),
        read_input("diff_scope", env, config),
    )
    review = build_review_config(env, config)

    return Settings(
        scan=scan,
        review=review,
        github_token=read_input("github_token", env, config) or env.get("GITHUB_TOKEN") or None,
        repository=env.get("GITHUB_REPOSITORY") or None,
        event_path=env.get("GITHUB_EVENT_PATH") or None,
        api_url=env.get("GITHUB_API_URL") or DEFAULT_API_URL,
        output_path=env.get("GITHUB_OUTPUT") or None,
        dry_run=parse_bool(read_input("dry_run", env, config), "dry_run"),
        debug=env.get("RUNNER_DEBUG") == "1",
        logging=dict(config.get("logging") or {}),
    )
