"""Run git via subprocess inside one repository."""

from __future__ import annotations

import shlex
import subprocess
from pathlib import Path

from ..exceptions import DiffUnavailableError
from ..logging_config import get_logger

logger = get_logger(__name__)


class GitCommandRunner:
    """Runs ``git -C <repo> ...`` commands one at a time, waiting for each."""

    def __init__(self, repo_path: str | Path, timeout: int = 120):
        self.repo_path = str(Path(repo_path).resolve())
        self.timeout = timeout

    def run(self, *args: str) -> str:
        """Run a git command and return its stdout.

        Raises:
            DiffUnavailableError: On a non-zero exit, a missing git binary or a timeout.
        """
        result = self._execute(args)
        if result.returncode != 0:
            raise DiffUnavailableError(self._describe(args), result.stderr.strip())
        logger.debug("%s", result.stdout.rstrip())
        return result.stdout

    def succeeds(self, *args: str) -> bool:
        """Run a git command only for its exit status."""
        result = self._execute(args)
        return result.returncode == 0

    def _execute(self, args: tuple[str, ...]) -> subprocess.CompletedProcess:
        command = self._describe(args)
        logger.info("Running: %s", command)
        try:
            return subprocess.run(
                ["git", "-C", self.repo_path, *args],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise DiffUnavailableError(command, "git executable not found") from e
        except subprocess.TimeoutExpired as e:
            raise DiffUnavailableError(command, f"timed out after {self.timeout}s") from e

    @staticmethod
    def _describe(args: tuple[str, ...]) -> str:
        return shlex.join(("git", *args))
