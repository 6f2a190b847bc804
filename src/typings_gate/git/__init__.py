"""Git access: command runner and baseline diff."""

from .commands import GitCommandRunner
from .diff import GitDiffResolver, git_diff, parse_name_status

__all__ = [
    "GitCommandRunner",
    "GitDiffResolver",
    "git_diff",
    "parse_name_status",
]
