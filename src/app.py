"""Application entry point for diffscope."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint

import settings as settings_module
from adapters.action_outputs import format_error, result_outputs, write_outputs
from adapters.dry_run import DryRunPublisher
from adapters.github_mapper import annotation_from_payload, pull_request_from_event
from adapters.github_publisher import GitHubReviewPublisher
from adapters.github_source import GitHubPullRequestSource
from client import build_client
from core.processor import ReviewProcessor, scan_diff
from settings import Settings

NAME = "DIFFSCOPE"
FONT = "tarty-1"

LOGGER = logging.getLogger(__name__)


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict, token: Optional[str]) -> list[str]:
    values = [token] if token else []
    redact_cfg = config.get("redact", {}) if config else {}
    if redact_cfg.get("enabled", False):
        for name in redact_cfg.get("patterns", []):
            value = os.getenv(name)
            if value:
                values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging(settings: Settings) -> None:
    config = settings.logging or {}
    if not config.get("enabled", True):
        return

    level_name = "DEBUG" if settings.debug else str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config, settings.github_token)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/diffscope.log")
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _load_event(path: Optional[str]) -> dict:
    if not path or not os.path.exists(path):
        return {}
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _run() -> None:
    settings = settings_module.load_settings()
    _print_banner()
    _configure_logging(settings)

    LOGGER.info("Starting diffscope with %s pattern(s), scope=%s", len(settings.scan.patterns), settings.scan.scope.value)

    pull_request = pull_request_from_event(_load_event(settings.event_path))
    if pull_request is None:
        raise RuntimeError("No pull request found.")

    client = build_client(settings)
    source = GitHubPullRequestSource(client, pull_request)
    # The sink decides whether anything leaves the runner; the processor
    # does not know the difference.
    if settings.dry_run:
        sink = DryRunPublisher()
    else:
        sink = GitHubReviewPublisher(client, pull_request)

    processor = ReviewProcessor(
        source=source,
        sink=sink,
        scan_config=settings.scan,
        review_config=settings.review,
    )
    result = processor.run()
    write_outputs(settings.output_path, result_outputs(result))


def _read_text(path: Optional[str]) -> str:
    if not path or path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as handle:
        return handle.read()


def _scan(args: argparse.Namespace) -> None:
    """Scan a local diff and print findings as JSON lines."""

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    env = os.environ
    config = settings_module.load_json_config(args.config)
    patterns_value = "\n".join(args.pattern) if args.pattern else settings_module.read_input(
        "regex_patterns", env, config
    )
    scope_value = args.scope or settings_module.read_input("diff_scope", env, config)
    scan_config = settings_module.build_scan_config(patterns_value, scope_value)

    existing = []
    if args.existing:
        payloads = json.loads(_read_text(args.existing))
        existing = [annotation_from_payload(payload) for payload in payloads]

    result = scan_diff(_read_text(args.diff), scan_config.patterns, scan_config.scope, existing)
    for finding in result.new_findings:
        print(
            json.dumps(
                {
                    "path": finding.path,
                    "line": finding.line,
                    "side": finding.side.value,
                    "content": finding.content,
                    "pattern": finding.pattern,
                }
            )
        )
    print(
        f"has_match={str(result.has_match).lower()} new={len(result.new_findings)} duplicates={result.duplicate_count}",
        file=sys.stderr,
    )


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="diffscope")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Review the pull request of the current workflow run")
    scan_parser = subparsers.add_parser("scan", help="Scan a local diff and print findings")
    scan_parser.add_argument("--diff", help="Diff file to read (default: stdin)")
    scan_parser.add_argument("--pattern", action="append", help="Regex pattern; repeat for more")
    scan_parser.add_argument("--scope", choices=["both", "added", "removed"])
    scan_parser.add_argument("--existing", help="JSON file with existing review comments")
    scan_parser.add_argument("--config", help="JSON config file")
    scan_parser.add_argument("-v", "--verbose", action="store_true")

    args = parser.parse_args(argv)
    try:
        if args.command == "scan":
            _scan(args)
            return
        _run()
    except (ValueError, RuntimeError, OSError) as exc:
        LOGGER.debug("Run failed", exc_info=True)
        print(format_error(str(exc)))
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
