"""Command-line interface for refmirror.

This module provides the Typer-based CLI for mirroring refs between
repositories and inspecting the refs of a local repository.
"""

import json
import logging
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from refmirror import __version__
from refmirror.config import get_config, get_env_var_docs
from refmirror.core.exceptions import (
    ConfigError,
    MirrorError,
    RefMirrorError,
    RepositoryError,
)
from refmirror.core.logging import setup_logging
from refmirror.core.mirror import Mirror
from refmirror.core.models import MirrorResult
from refmirror.utils.repo import open_repo, repo_refs

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1

app = typer.Typer(
    name="refmirror",
    help="refmirror - Mirror every ref of a git repository onto another remote.",
    add_completion=False,
)
console = Console()
error_console = Console(stderr=True)


def _display_error(error: Exception, title: str = "Error") -> None:
    """Display an error with rich formatting."""
    if isinstance(error, ConfigError):
        message = f"[bold red]Configuration Error[/bold red]\n\n{error.message}"
        if error.config_key:
            message += f"\n\n[dim]Config key:[/dim] {error.config_key}"
        error_console.print(Panel(message, title="[red]Config Error[/red]", border_style="red"))
    elif isinstance(error, RepositoryError):
        message = f"[bold red]Repository Error[/bold red]\n\n{error.message}"
        if error.path:
            message += f"\n\n[dim]Path:[/dim] {error.path}"
        error_console.print(Panel(message, title="[red]Repository Error[/red]", border_style="red"))
    elif isinstance(error, MirrorError):
        message = f"[bold red]Mirror Error[/bold red]\n\n{error.message}"
        if error.remote:
            message += f"\n\n[dim]Remote:[/dim] {error.remote}"
        for key, value in error.context.items():
            if key != "remote":
                message += f"\n[dim]{key}:[/dim] {value}"
        error_console.print(Panel(message, title="[red]Mirror Error[/red]", border_style="red"))
    elif isinstance(error, RefMirrorError):
        message = f"[bold red]Error[/bold red]\n\n{error.message}"
        error_console.print(Panel(message, title=f"[red]{title}[/red]", border_style="red"))
    else:
        error_console.print(
            Panel(
                f"[bold red]{title}[/bold red]\n\n{error}",
                title="[red]Error[/red]",
                border_style="red",
            )
        )


def _read_option_file(path: Optional[Path], option: str) -> Optional[str]:
    if path is None:
        return None
    try:
        return path.read_text()
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}", config_key=option) from e


def _print_result(result: MirrorResult) -> None:
    table = Table(title=f"{result.source} -> {result.destination}")
    table.add_column("Ref", style="cyan")
    table.add_column("Action")
    for name in result.updated:
        table.add_row(name, "[green]would update[/green]" if result.dry_run else "[green]updated[/green]")
    for name in result.deleted:
        table.add_row(name, "[red]would delete[/red]" if result.dry_run else "[red]deleted[/red]")
    for name in result.unchanged:
        table.add_row(name, "[dim]up to date[/dim]")
    console.print(table)
    console.print(f"[dim]Completed in {result.duration:.2f}s[/dim]")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold cyan]refmirror[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.command()
def mirror(
    source: Annotated[
        Optional[str],
        typer.Option("--source", "-s", help="Repository to mirror from (URL or path)"),
    ] = None,
    destination: Annotated[
        Optional[str],
        typer.Option("--destination", "-d", help="Repository to mirror to (URL or path)"),
    ] = None,
    ssh_key_file: Annotated[
        Optional[Path],
        typer.Option(
            "--ssh-key-file",
            help="File holding the SSH private key for SSH remotes",
            exists=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ] = None,
    known_hosts_file: Annotated[
        Optional[Path],
        typer.Option(
            "--known-hosts-file",
            help="known_hosts file used to verify SSH remotes",
            exists=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ] = None,
    exclude: Annotated[
        Optional[list[str]],
        typer.Option(
            "--exclude",
            "-e",
            help="Ref pattern never pushed or pruned (repeatable, replaces the default refs/pull/*)",
        ),
    ] = None,
    dry_run: Annotated[
        Optional[bool],
        typer.Option("--dry-run", help="Show what would be pushed without pushing"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Print the result as JSON"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress non-error output (only show errors)"),
    ] = False,
) -> None:
    """Mirror every ref of the source repository onto the destination.

    Options not given on the command line are read from REFMIRROR_*
    environment variables (see 'refmirror env').

    Exit codes:
        0: Mirror completed
        1: Error occurred
    """
    try:
        cli_args: dict[str, Any] = {
            "source": source,
            "destination": destination,
            "ssh_private_key": _read_option_file(ssh_key_file, "ssh_private_key"),
            "ssh_known_hosts": _read_option_file(known_hosts_file, "ssh_known_hosts"),
            "exclude": exclude or None,
            "dry_run": dry_run,
        }
        config = get_config(cli_args=cli_args)
    except ConfigError as e:
        _display_error(e)
        raise typer.Exit(code=EXIT_ERROR) from None

    if quiet or (json_output and not verbose):
        setup_logging(level=logging.ERROR)
    elif verbose:
        setup_logging(verbose=True)
    else:
        setup_logging(level=getattr(logging, config.log_level.value.upper()))

    try:
        result = Mirror(config).run()
    except RefMirrorError as e:
        _display_error(e)
        raise typer.Exit(code=EXIT_ERROR) from None
    except KeyboardInterrupt:
        if not quiet:
            error_console.print("\n[yellow]Mirror interrupted by user[/yellow]")
        raise typer.Exit(code=EXIT_ERROR) from None
    except Exception as e:
        _display_error(e, title="Error during mirror")
        raise typer.Exit(code=EXIT_ERROR) from None

    if json_output:
        # print() keeps Rich from wrapping the JSON
        print(result.model_dump_json(indent=2))
    elif not quiet:
        _print_result(result)

    raise typer.Exit(code=EXIT_SUCCESS)


@app.command()
def refs(
    path: Annotated[
        Path,
        typer.Argument(
            help="Path to a local repository (bare or not)",
            exists=True,
            file_okay=False,
            resolve_path=True,
        ),
    ],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Print the refs as JSON"),
    ] = False,
) -> None:
    """List every ref of a local repository."""
    try:
        repo = open_repo(path)
    except RepositoryError as e:
        _display_error(e)
        raise typer.Exit(code=EXIT_ERROR) from None

    try:
        found = repo_refs(repo)
    finally:
        repo.close()

    if json_output:
        print(json.dumps([{"name": r.name, "target": r.target, "symbolic": r.symbolic} for r in found], indent=2))
        return

    table = Table(title=str(path))
    table.add_column("Ref", style="cyan")
    table.add_column("Target")
    for ref in found:
        table.add_row(ref.name, f"-> {ref.target}" if ref.symbolic else ref.target)
    console.print(table)


@app.command()
def env() -> None:
    """Describe the environment variables refmirror reads."""
    table = Table(title="Environment variables")
    table.add_column("Variable", style="cyan")
    table.add_column("Description")
    for name, description in get_env_var_docs().items():
        table.add_row(name, description)
    console.print(table)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """refmirror - Mirror every ref of a git repository onto another remote.

    Use 'refmirror mirror --source <url> --destination <url>' to mirror refs.
    """
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


def run_cli() -> None:
    """Entry point for the ``refmirror`` console script."""
    app()


if __name__ == "__main__":
    run_cli()
