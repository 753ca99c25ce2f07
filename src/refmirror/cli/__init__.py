"""refmirror CLI - Command-line interface for the refmirror tool."""

from refmirror.cli.main import app, run_cli

__all__ = ["app", "run_cli"]
