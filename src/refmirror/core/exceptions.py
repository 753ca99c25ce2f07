"""Custom exception hierarchy for refmirror.

All exceptions inherit from the base RefMirrorError class, allowing
callers to catch every refmirror error with a single except clause.
"""

from __future__ import annotations


class RefMirrorError(Exception):
    """Base exception for all refmirror errors.

    Attributes:
        message: Human-readable error message.
        context: Optional dictionary of additional context about the error.
    """

    def __init__(self, message: str, context: dict | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including context if present."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigError(RefMirrorError):
    """Exception raised when the configuration is invalid or incomplete.

    Example:
        >>> raise ConfigError("Destination repository is required", config_key="destination")
    """

    def __init__(self, message: str, config_key: str | None = None, context: dict | None = None):
        ctx = context or {}
        if config_key:
            ctx["config_key"] = config_key
        super().__init__(message, ctx)
        self.config_key = config_key


class RepositoryError(RefMirrorError):
    """Exception raised when a local repository cannot be created or opened.

    Example:
        >>> raise RepositoryError("Not a git repository", path="/tmp/empty")
    """

    def __init__(self, message: str, path: str | None = None, context: dict | None = None):
        ctx = context or {}
        if path:
            ctx["path"] = path
        super().__init__(message, ctx)
        self.path = path


class MirrorError(RefMirrorError):
    """Exception raised when fetching from or pushing to a remote fails.

    Example:
        >>> raise MirrorError("Push rejected", remote="git@example.com:org/repo.git")
    """

    def __init__(self, message: str, remote: str | None = None, context: dict | None = None):
        ctx = context or {}
        if remote:
            ctx["remote"] = remote
        super().__init__(message, ctx)
        self.remote = remote
