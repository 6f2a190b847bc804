"""CLI entry point: registers all subcommands."""

import typer

app = typer.Typer(
    name="typings-gate",
    help="typings-gate - pre-merge change detection for type-definition repositories",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


# Import subcommands to register them
from .affected import affected as _affected  # noqa: F401, E402
from .deprecations import check_deprecations as _check_deprecations  # noqa: F401, E402
from .diff import diff_cmd as _diff_cmd  # noqa: F401, E402
