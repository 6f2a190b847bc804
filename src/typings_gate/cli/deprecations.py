"""``typings-gate check-deprecations``: validate removed packages against the registry."""

from pathlib import Path
from typing import Optional

from ..catalog import PackageCatalog
from ..deprecations import find_deprecations, validate_deprecations
from ..exceptions import GateError, TypingsGateError
from ..git import git_diff
from ..layout import make_resolver
from ..logging_config import setup_logging
from ..registry import RegistryClient
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


@app.command(name="check-deprecations")
def check_deprecations(
    path: Path = PathArgument,
    branch: Optional[str] = BranchOption,
    registry: Optional[str] = RegistryOption,
    config: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
    log_file: Optional[Path] = LogFileOption,
) -> None:
    """Check every package removed by the pending change.

    Runs even when the deprecation manifest itself is unchanged.
    """
    settings = resolve_config(config=config, branch=branch, registry_url=registry, verbose=verbose, quiet=quiet)
    setup_logging(settings.verbosity, log_file)

    try:
        catalog = PackageCatalog.from_repository(path, settings)
        changes = git_diff(path, settings)
        records = find_deprecations(
            catalog, changes, make_resolver(settings.types_dir), settings.not_needed_file
        )
        with RegistryClient(settings.registry_url, settings.registry_timeout_seconds) as client:
            checked = validate_deprecations(records, client, settings.not_needed_file)
    except (GateError, TypingsGateError) as e:
        raise error_exit(e)

    if not checked:
        console.print("[dim]No deprecated packages in this change.[/dim]")
        return
    for record in checked:
        console.print(
            f"[green]OK[/green] {record.full_registry_name} -> {record.library_name}@{record.version}",
            highlight=False,
        )
