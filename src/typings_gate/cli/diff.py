"""``typings-gate diff``: show the changes against the baseline branch."""

from pathlib import Path
from typing import Optional

from rich.table import Table

from ..exceptions import GateError
from ..git import git_diff
from ..layout import make_resolver
from ..logging_config import setup_logging
from . import app
from ._common import (
    BranchOption,
    ConfigOption,
    LogFileOption,
    PathArgument,
    VerboseOption,
    console,
    error_exit,
    resolve_config,
)


@app.command(name="diff")
def diff_cmd(
    path: Path = PathArgument,
    branch: Optional[str] = BranchOption,
    config: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
    log_file: Optional[Path] = LogFileOption,
) -> None:
    """List changed files and the package each belongs to."""
    settings = resolve_config(config=config, branch=branch, verbose=verbose)
    setup_logging(settings.verbosity, log_file)

    try:
        changes = git_diff(path, settings)
    except GateError as e:
        raise error_exit(e)

    resolve = make_resolver(settings.types_dir)
    table = Table(title=f"Changes since {settings.source_branch}")
    table.add_column("Status")
    table.add_column("File")
    table.add_column("Package")
    for change in changes:
        identity = resolve(change.file)
        table.add_row(change.status.value, change.file, str(identity) if identity else "-")
    console.print(table)
