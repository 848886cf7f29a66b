from __future__ import annotations

import json

import pytest

from core.config import ConfigError
from core.models import Scope
from core.patterns import InvalidPatternError
from settings import build_scan_config, load_settings, parse_bool, read_input


def _env(tmp_path, **inputs) -> dict:
    env = {"GITHUB_WORKSPACE": str(tmp_path)}
    for name, value in inputs.items():
        env[f"INPUT_{name.upper()}"] = value
    return env


def test_defaults(tmp_path) -> None:
    settings = load_settings(_env(tmp_path, regex_patterns="TODO"))
    assert [pattern.raw for pattern in settings.scan.patterns] == ["TODO"]
    assert settings.scan.scope is Scope.BOTH
    assert settings.review.request_changes_on_match is False
    assert settings.review.no_match_found_message
    assert settings.dry_run is False
    assert settings.github_token is None


def test_inputs_from_environment(tmp_path) -> None:
    env = _env(
        tmp_path,
        regex_patterns="foo,bar",
        diff_scope="Added",
        mark_changes_requested="true",
        match_found_message="found it",
        github_token="ghs_secret",
    )
    env.update({"GITHUB_REPOSITORY": "octo/repo", "RUNNER_DEBUG": "1"})
    settings = load_settings(env)
    assert [pattern.raw for pattern in settings.scan.patterns] == ["foo", "bar"]
    assert settings.scan.scope is Scope.ADDED
    assert settings.review.request_changes_on_match is True
    assert settings.review.match_found_message == "found it"
    assert settings.github_token == "ghs_secret"
    assert settings.repository == "octo/repo"
    assert settings.debug is True


def test_config_file_is_used_and_environment_wins(tmp_path) -> None:
    config = {
        "regex_patterns": ["a{1,3}", "b"],
        "diff_scope": "removed",
        "mark_changes_requested": True,
        "logging": {"level": "DEBUG"},
    }
    (tmp_path / "diffscope.json").write_text(json.dumps(config), encoding="utf-8")

    settings = load_settings(_env(tmp_path, diff_scope="both"))
    assert [pattern.raw for pattern in settings.scan.patterns] == ["a{1,3}", "b"]
    assert settings.scan.scope is Scope.BOTH
    assert settings.review.request_changes_on_match is True
    assert settings.logging == {"level": "DEBUG"}


def test_explicit_missing_config_file(tmp_path) -> None:
    env = _env(tmp_path, regex_patterns="x")
    env["DIFFSCOPE_CONFIG"] = str(tmp_path / "missing.json")
    with pytest.raises(ConfigError):
        load_settings(env)


def test_missing_patterns_fail_fast(tmp_path) -> None:
    with pytest.raises(ConfigError, match="regex_patterns"):
        load_settings(_env(tmp_path))


def test_invalid_pattern_fails_fast(tmp_path) -> None:
    with pytest.raises(InvalidPatternError, match=r"\[unclosed"):
        load_settings(_env(tmp_path, regex_patterns="ok\n[unclosed"))


def test_unknown_scope() -> None:
    with pytest.raises(ConfigError, match="sideways"):
        build_scan_config("x", "sideways")


def test_parse_bool() -> None:
    assert parse_bool("TRUE", "flag") is True
    assert parse_bool("", "flag") is False
    with pytest.raises(ConfigError, match="flag"):
        parse_bool("maybe", "flag")


def test_empty_environment_input_falls_back() -> None:
    env = {"INPUT_DIFF_SCOPE": ""}
    assert read_input("diff_scope", env, {"diff_scope": "added"}) == "added"
    assert read_input("diff_scope", env, {}) == "both"


def test_api_url_defaults_to_public_github(tmp_path) -> None:
    from adapters.github_api import DEFAULT_API_URL

    settings = load_settings(_env(tmp_path, regex_patterns="x"))
    assert settings.api_url == DEFAULT_API_URL

    env = _env(tmp_path, regex_patterns="x")
    env["GITHUB_API_URL"] = "https://ghe.example.com/api/v3"
    assert load_settings(env).api_url == "https://ghe.example.com/api/v3"
