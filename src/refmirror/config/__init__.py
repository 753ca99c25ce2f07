"""Configuration management for refmirror.

Settings are merged with the following priority:

1. CLI arguments (highest priority)
2. ``REFMIRROR_*`` environment variables
3. GitHub Actions environment (default source repository)
4. Default values (lowest priority)

Example usage::

    from refmirror.config import get_config

    config = get_config(cli_args={"destination": "git@example.com:org/mirror.git"})
    print(config.source, config.destination)
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import ValidationError

from refmirror.config.env import (
    ENV_DESTINATION,
    ENV_DRY_RUN,
    ENV_EXCLUDE,
    ENV_LOG_LEVEL,
    ENV_SOURCE,
    ENV_SSH_KNOWN_HOSTS,
    ENV_SSH_PRIVATE_KEY,
    get_env_overrides,
    get_env_var_docs,
    get_github_source,
)
from refmirror.config.schema import DEFAULT_EXCLUDE, LogLevel, MirrorConfig
from refmirror.core.exceptions import ConfigError

__all__ = [
    "DEFAULT_EXCLUDE",
    "LogLevel",
    "MirrorConfig",
    "ENV_SOURCE",
    "ENV_DESTINATION",
    "ENV_SSH_PRIVATE_KEY",
    "ENV_SSH_KNOWN_HOSTS",
    "ENV_EXCLUDE",
    "ENV_DRY_RUN",
    "ENV_LOG_LEVEL",
    "get_env_overrides",
    "get_env_var_docs",
    "ConfigPriority",
    "get_config",
    "get_config_source",
    "load_config",
    "reset_config",
]


class ConfigPriority(str, Enum):
    """Configuration source priority levels.

    Higher priority sources override lower priority ones.
    """

    DEFAULT = "default"
    CI = "ci"
    ENVIRONMENT = "environment"
    CLI = "cli"


_config_cache: MirrorConfig | None = None
_config_sources: dict[str, ConfigPriority] = {}


def _merge(
    base: dict[str, Any],
    override: dict[str, Any],
    source: ConfigPriority,
    sources: dict[str, ConfigPriority],
) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if value is None:
            continue
        result[key] = value
        sources[key] = source
    return result


def load_config(
    cli_args: dict[str, Any] | None = None,
    use_env: bool = True,
) -> MirrorConfig:
    """Load configuration with proper priority handling.

    Args:
        cli_args: Optional dictionary of CLI argument overrides. ``None``
            values are ignored so unset options fall through.
        use_env: Whether to read the environment at all.

    Returns:
        A fully merged MirrorConfig instance.

    Raises:
        ConfigError: If the merged configuration is invalid.
    """
    global _config_cache, _config_sources

    sources: dict[str, ConfigPriority] = {}
    config_dict: dict[str, Any] = {}

    if use_env:
        github_source = get_github_source()
        if github_source:
            config_dict = _merge(config_dict, {"source": github_source}, ConfigPriority.CI, sources)

        config_dict = _merge(config_dict, get_env_overrides(), ConfigPriority.ENVIRONMENT, sources)

    if cli_args:
        config_dict = _merge(config_dict, cli_args, ConfigPriority.CLI, sources)

    # MirrorConfig only reads init values, the environment was read above
    try:
        config = MirrorConfig.model_validate(config_dict)
    except ValidationError as e:
        errors = e.errors()
        key = ".".join(str(loc) for loc in errors[0]["loc"]) if errors else None
        raise ConfigError(f"Invalid configuration: {e}", config_key=key) from e

    _config_cache = config
    _config_sources = sources

    return config


def get_config(
    cli_args: dict[str, Any] | None = None,
    reload: bool = False,
) -> MirrorConfig:
    """Get the current configuration, loading if necessary."""
    global _config_cache

    if _config_cache is None or reload or cli_args:
        return load_config(cli_args=cli_args)

    return _config_cache


def get_config_source(key: str) -> ConfigPriority | None:
    """Get the priority source a configuration key came from.

    Returns:
        The ConfigPriority that provided this value, or None if using default.
    """
    return _config_sources.get(key)


def reset_config() -> None:
    """Reset the configuration cache. Primarily useful for testing."""
    global _config_cache, _config_sources
    _config_cache = None
    _config_sources = {}
