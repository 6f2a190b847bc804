"""
Logging for typings-gate.

Everything is logged to stderr through rich so that stdout carries only the
selection output CI consumes. ``--log-file`` adds a plain-text copy with
timestamps, which is what CI artifacts keep.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "typings_gate"

_LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.INFO,
    "verbose": logging.DEBUG,
}

_FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(verbosity: str = "normal", log_file: Optional[Union[str, Path]] = None) -> logging.Logger:
    """
    Route typings-gate logs to stderr and, optionally, to a file.

    Args:
        verbosity: ``quiet`` (errors only), ``normal`` (git commands and
            selection counts) or ``verbose`` (adds git output and registry URLs)
        log_file: File that receives every record at the chosen level,
            appended to so successive CI steps share one log

    Returns:
        The ``typings_gate`` logger
    """
    level = _LEVELS.get(verbosity, logging.INFO)
    verbose = level == logging.DEBUG

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            markup=False,
            rich_tracebacks=True,
            show_path=verbose,
        )
    ]
    if log_file is not None:
        handlers.append(_file_handler(Path(log_file)))

    # Replace handlers from an earlier call in the same process.
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    return logger


def _file_handler(path: Path) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``typings_gate`` namespace (e.g. ``typings_gate.git.diff``)."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
