"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..config import GateConfig, load_config
from ..exceptions import GateError, TypingsGateError

console = Console()
err_console = Console(stderr=True)


def resolve_config(
    config: Optional[Path] = None,
    branch: Optional[str] = None,
    registry_url: Optional[str] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> GateConfig:
    """Build configuration from CLI options."""
    try:
        return load_config(
            config_file=config,
            source_branch=branch,
            registry_url=registry_url,
            verbose=verbose,
            quiet=quiet,
        )
    except TypingsGateError as e:
        raise error_exit(e)


def error_exit(error: Exception) -> typer.Exit:
    """Print a gate failure; the caller raises the returned Exit(1)."""
    if isinstance(error, GateError):
        err_console.print(f"[red]Error {error.code.value}:[/red] {escape(error.message)}")
        if error.recovery_hint:
            err_console.print(f"[dim]{escape(error.recovery_hint)}[/dim]")
    else:
        err_console.print(f"[red]Error:[/red] {escape(str(error))}")
    return typer.Exit(1)


PathArgument = typer.Argument(
    Path("."),
    help="Path to the type-definitions repository",
    exists=True,
    file_okay=False,
    dir_okay=True,
    readable=True,
)

ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="Configuration file (TOML)",
    exists=True,
    file_okay=True,
    dir_okay=False,
)

BranchOption = typer.Option(None, "--branch", "-b", help="Baseline branch (default: master)")
RegistryOption = typer.Option(None, "--registry", help="npm registry URL")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Log git commands and their output")
QuietOption = typer.Option(False, "--quiet", "-q", help="Only log errors")
LogFileOption = typer.Option(
    None,
    "--log-file",
    help="Also append logs to this file",
    file_okay=True,
    dir_okay=False,
    writable=True,
)
