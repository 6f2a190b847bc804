"""
typings-gate - pre-merge change detection for type-definition repositories.

Works out which packages a pending change affects and checks that packages
marked "no longer needed" are really replaced on the npm registry.
"""

__version__ = "0.1.0"

from .catalog import PackageCatalog
from .deprecations import check_deprecation, find_deprecations, validate_deprecations
from .git import GitDiffResolver, git_diff
from .grouping import group_deletions
from .models import ChangeEntry, ChangeStatus, DeprecationRecord, PackageIdentity, SelectionResult
from .selection import get_affected_packages_from_diff

__all__ = [
    "get_affected_packages_from_diff",  # Main entry point
    "git_diff",
    "GitDiffResolver",
    "group_deletions",
    "find_deprecations",
    "check_deprecation",
    "validate_deprecations",
    "PackageCatalog",
    "ChangeEntry",
    "ChangeStatus",
    "PackageIdentity",
    "DeprecationRecord",
    "SelectionResult",
]
