"""Environment variable mapping for refmirror configuration.

This module defines the environment variables that can be used to
configure refmirror and provides utilities for reading them.
"""

from __future__ import annotations

import os
from typing import Any

# Environment variable names
ENV_SOURCE = "REFMIRROR_SOURCE"
ENV_DESTINATION = "REFMIRROR_DESTINATION"
ENV_SSH_PRIVATE_KEY = "REFMIRROR_SSH_PRIVATE_KEY"
ENV_SSH_KNOWN_HOSTS = "REFMIRROR_SSH_KNOWN_HOSTS"
ENV_EXCLUDE = "REFMIRROR_EXCLUDE"
ENV_DRY_RUN = "REFMIRROR_DRY_RUN"
ENV_LOG_LEVEL = "REFMIRROR_LOG_LEVEL"

# Set by GitHub Actions runners
ENV_GITHUB_SERVER_URL = "GITHUB_SERVER_URL"
ENV_GITHUB_REPOSITORY = "GITHUB_REPOSITORY"


def _parse_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes", "on", "enabled")


def _parse_list(value: str) -> list[str]:
    """Parse a list from a comma-separated string."""
    return [item.strip() for item in value.split(",") if item.strip()]


def get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables.

    Returns:
        Dictionary of configuration values from environment variables,
        holding only the keys that are actually set.
    """
    overrides: dict[str, Any] = {}

    if ENV_SOURCE in os.environ:
        overrides["source"] = os.environ[ENV_SOURCE]

    if ENV_DESTINATION in os.environ:
        overrides["destination"] = os.environ[ENV_DESTINATION]

    if ENV_SSH_PRIVATE_KEY in os.environ:
        overrides["ssh_private_key"] = os.environ[ENV_SSH_PRIVATE_KEY]

    if ENV_SSH_KNOWN_HOSTS in os.environ:
        overrides["ssh_known_hosts"] = os.environ[ENV_SSH_KNOWN_HOSTS]

    if ENV_EXCLUDE in os.environ:
        overrides["exclude"] = _parse_list(os.environ[ENV_EXCLUDE])

    if ENV_DRY_RUN in os.environ:
        overrides["dry_run"] = _parse_bool(os.environ[ENV_DRY_RUN])

    if ENV_LOG_LEVEL in os.environ:
        overrides["log_level"] = os.environ[ENV_LOG_LEVEL].lower()

    # Drop empty strings so an unset CI input does not mask a default
    return {k: v for k, v in overrides.items() if v != ""}


def get_github_source() -> str | None:
    """Build the URL of the repository a GitHub Actions job runs for.

    Returns:
        ``$GITHUB_SERVER_URL/$GITHUB_REPOSITORY`` if both are set, None otherwise.
    """
    server = os.environ.get(ENV_GITHUB_SERVER_URL, "").rstrip("/")
    repository = os.environ.get(ENV_GITHUB_REPOSITORY, "").strip("/")
    if server and repository:
        return f"{server}/{repository}"
    return None


def get_env_var_docs() -> dict[str, str]:
    """Get documentation for all environment variables.

    Returns:
        Dictionary mapping variable names to descriptions.
    """
    return {
        ENV_SOURCE: "Repository to mirror from (defaults to the GitHub Actions repository)",
        ENV_DESTINATION: "Repository to mirror to",
        ENV_SSH_PRIVATE_KEY: "Private key used for SSH remotes",
        ENV_SSH_KNOWN_HOSTS: "known_hosts content used to verify SSH remotes",
        ENV_EXCLUDE: "Comma-separated ref patterns never pushed or pruned",
        ENV_DRY_RUN: "Compute the refspecs without pushing (true/false)",
        ENV_LOG_LEVEL: "Logging level (debug, info, warning, error, critical)",
        ENV_GITHUB_SERVER_URL: "GitHub server URL, used for the default source",
        ENV_GITHUB_REPOSITORY: "owner/name of the GitHub repository, used for the default source",
    }
