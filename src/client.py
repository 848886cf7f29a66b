"""GitHub client factory for diffscope."""

from __future__ import annotations

import logging

from adapters.github_api import GitHubClient
from settings import Settings


def build_client(settings: Settings) -> GitHubClient:
    """Create a repository-scoped GitHub client from loaded settings.

    Fails fast on missing credentials rather than surfacing a 401 later.
    """

    if not settings.github_token:
        raise RuntimeError("Missing github_token input (or GITHUB_TOKEN in environment)")
    if not settings.repository:
        raise RuntimeError("Missing GITHUB_REPOSITORY in environment")

    logging.getLogger(__name__).info("Initializing GitHub client for %s", settings.repository)

    return GitHubClient(settings.github_token, settings.repository, api_url=settings.api_url)
