"""``typings-gate affected``: select the packages to test."""

import json
import re
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..catalog import PackageCatalog
from ..exceptions import GateError, TypingsGateError
from ..logging_config import setup_logging
from ..selection import get_affected_packages_from_diff, parse_selection
from . import app
from ._common import (
    BranchOption,
    ConfigOption,
    LogFileOption,
    PathArgument,
    QuietOption,
    RegistryOption,
    VerboseOption,
    console,
    error_exit,
    resolve_config,
)


@app.command()
def affected(
    path: Path = PathArgument,
    select: str = typer.Option(
        "affected",
        "--select",
        "-s",
        help="'all', 'affected', or a regular expression matched against package names",
    ),
    json_output: bool = typer.Option(False, "--json", help="Output in machine-readable JSON format"),
    branch: Optional[str] = BranchOption,
    registry: Optional[str] = RegistryOption,
    config: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
    log_file: Optional[Path] = LogFileOption,
) -> None:
    """Select the packages to test for the pending change.

    Validates deprecations first when the change touches the deprecation
    manifest; an invalid entry fails the command.

    [bold cyan]Examples:[/bold cyan]

      typings-gate affected .

      typings-gate affected . --select all --json

      typings-gate affected . --select "^react"
    """
    settings = resolve_config(config=config, branch=branch, registry_url=registry, verbose=verbose, quiet=quiet)
    setup_logging(settings.verbosity, log_file)

    try:
        selection = parse_selection(select)
    except re.error as e:
        raise typer.BadParameter(f"invalid pattern {select!r}: {e}", param_hint="--select") from e

    try:
        catalog = PackageCatalog.from_repository(path, settings)
        result = get_affected_packages_from_diff(catalog, path, selection, config=settings)
    except (GateError, TypingsGateError) as e:
        raise error_exit(e)

    if json_output:
        console.print_json(json.dumps(result.to_json()))
        return

    table = Table(title="Packages to test")
    table.add_column("Package")
    table.add_column("Reason")
    for name in sorted(result.package_names):
        table.add_row(name, "changed")
    for name in result.dependents:
        table.add_row(name, "dependent")
    console.print(table)
