"""Name-status diff against the baseline branch.

CI checkouts are often shallow. A typical pull request build runs::

    git clone --depth=50 <repo-url> repo
    cd repo
    git fetch origin +refs/pull/123/merge
    git checkout -qf FETCH_HEAD

so the baseline branch may not exist locally. Test any change here on both
full and shallow clones.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..config import DEFAULT_CONFIG, GateConfig
from ..logging_config import get_logger
from ..models import ChangeEntry, ChangeStatus
from .commands import GitCommandRunner

logger = get_logger(__name__)


class GitDiffResolver:
    """Resolve the changes between the working tree and the baseline branch."""

    def __init__(
        self,
        repo_path: str | Path,
        source_branch: str = "master",
        remote: str = "origin",
        runner: Optional[GitCommandRunner] = None,
    ):
        self.repo_path = str(repo_path)
        self.source_branch = source_branch
        self.remote = remote
        self.runner = runner or GitCommandRunner(repo_path)

    def resolve(self) -> list[ChangeEntry]:
        """Return one ChangeEntry per changed file, in git's output order."""
        if not self._baseline_exists():
            # Shallow clone: bring the baseline in and give it a local name.
            self.runner.run("fetch", self.remote, self.source_branch)
            self.runner.run("branch", self.source_branch, "FETCH_HEAD")

        diff = self._name_status(self.source_branch)
        if not diff:
            # Already on the baseline, so report the last commit instead.
            diff = self._name_status(f"{self.source_branch}~1")
        return parse_name_status(diff)

    def _baseline_exists(self) -> bool:
        return self.runner.succeeds("rev-parse", "--verify", "--quiet", self.source_branch)

    def _name_status(self, ref: str) -> str:
        return self.runner.run("diff", "--name-status", ref, "--").strip()


def parse_name_status(output: str) -> list[ChangeEntry]:
    """Parse ``git diff --name-status`` output.

    Only the first two whitespace-separated tokens of a line are used, so
    a rename line (``R100 old new``) becomes a modification of ``old``.
    """
    changes: list[ChangeEntry] = []
    for line in output.splitlines():
        tokens = line.split()
        if not tokens:
            continue
        if len(tokens) < 2:
            logger.warning("Ignoring malformed diff line: %r", line)
            continue
        status, file = tokens[0].strip(), tokens[1].strip()
        changes.append(ChangeEntry(ChangeStatus.from_token(status), file))
    return changes


def git_diff(repo_path: str | Path, config: GateConfig = DEFAULT_CONFIG) -> list[ChangeEntry]:
    """Resolve the diff for *repo_path* using the configured baseline."""
    resolver = GitDiffResolver(
        repo_path,
        source_branch=config.source_branch,
        remote=config.remote,
        runner=GitCommandRunner(repo_path, timeout=config.git_timeout_seconds),
    )
    return resolver.resolve()
