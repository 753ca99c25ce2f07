"""Configuration schema definitions using Pydantic Settings.

This module defines the configuration model for refmirror with
validation, defaults, and documentation.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from refmirror.core.exceptions import ConfigError

# Hosting services keep pull request refs read-only
DEFAULT_EXCLUDE = ["refs/pull/*"]


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class MirrorConfig(BaseSettings):
    """Main configuration for refmirror.

    Describes where refs are mirrored from and to, the SSH material used
    to reach SSH remotes, and which refs are left alone.
    """

    model_config = SettingsConfigDict(
        env_prefix="REFMIRROR_",
        case_sensitive=False,
        extra="ignore",
    )

    source: str | None = Field(
        default=None,
        description="Repository URL or path to mirror from",
    )
    destination: str | None = Field(
        default=None,
        description="Repository URL or path to mirror to",
    )
    ssh_private_key: SecretStr | None = Field(
        default=None,
        description="Private key used to authenticate against SSH remotes",
    )
    ssh_known_hosts: str | None = Field(
        default=None,
        description="known_hosts content used to verify SSH remotes",
    )
    exclude: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE),
        description="Ref patterns (fnmatch) that are never pushed or pruned",
    )
    dry_run: bool = Field(
        default=False,
        description="Compute the refspecs without pushing them",
    )
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Only accept explicit values.

        The environment is read by ``refmirror.config.load_config``, which
        parses comma separated lists and applies the priority order.
        """
        return (init_settings,)

    @field_validator("source", "destination", "ssh_private_key", "ssh_known_hosts", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Treat empty strings as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("exclude", mode="before")
    @classmethod
    def parse_exclude(cls, v: Any) -> list[str]:
        """Parse exclude patterns from string or list."""
        if v is None:
            return list(DEFAULT_EXCLUDE)
        if isinstance(v, str):
            return [p.strip() for p in v.split(",") if p.strip()]
        return list(v)

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: Any) -> LogLevel:
        """Validate and normalize log level."""
        if v is None:
            return LogLevel.INFO
        if isinstance(v, LogLevel):
            return v
        v = str(v).lower()
        try:
            return LogLevel(v)
        except ValueError:
            valid = ", ".join(level.value for level in LogLevel)
            raise ValueError(f"log_level must be one of: {valid}")

    def check_remotes(self) -> None:
        """Ensure both remotes are set and distinct.

        Raises:
            ConfigError: If a remote is missing or both point at the same place.
        """
        if not self.source:
            raise ConfigError("Source repository is required", config_key="source")
        if not self.destination:
            raise ConfigError("Destination repository is required", config_key="destination")
        if self.source.rstrip("/") == self.destination.rstrip("/"):
            raise ConfigError(
                "Source and destination must be different repositories",
                config_key="destination",
                context={"source": self.source},
            )

    def private_key(self) -> str | None:
        """Return the SSH private key in clear text, if configured."""
        if self.ssh_private_key is None:
            return None
        return self.ssh_private_key.get_secret_value()
