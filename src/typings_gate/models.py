"""Data models for change detection and deprecation validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .versions import WILDCARD, DependencyVersion, format_dependency_version


class ChangeStatus(str, Enum):
    ADDED = "A"
    DELETED = "D"
    MODIFIED = "M"

    @classmethod
    def from_token(cls, token: str) -> "ChangeStatus":
        """Map a ``git diff --name-status`` letter; anything but A/D is a modification."""
        token = token.strip()
        if token.startswith("A"):
            return cls.ADDED
        if token.startswith("D"):
            return cls.DELETED
        return cls.MODIFIED


@dataclass(frozen=True)
class ChangeEntry:
    """One line of a name-status diff."""

    status: ChangeStatus
    file: str  # repository-relative, forward slashes


@dataclass(frozen=True)
class PackageIdentity:
    """A typings package name plus its directory version (or the wildcard)."""

    name: str
    version: DependencyVersion = WILDCARD

    @property
    def formatted_version(self) -> str:
        return format_dependency_version(self.version)

    def __str__(self) -> str:
        if self.version == WILDCARD:
            return self.name
        return f"{self.name}@{self.formatted_version}"


@dataclass(frozen=True)
class DeprecationRecord:
    """Entry of the deprecation manifest.

    ``typings_name`` is the removed package directory, ``library_name`` and
    ``version`` the registry package claimed to ship its own types from that
    version on, and ``full_registry_name`` the name the old typings were
    published under (e.g. ``@types/babel__parser``).
    """

    typings_name: str
    library_name: str
    version: str
    full_registry_name: str


@dataclass(frozen=True)
class TypingsPackage:
    """A package directory still present in the repository."""

    name: str
    version: DependencyVersion
    sub_directory_path: str  # e.g. "types/foo" or "types/foo/v1"
    dependencies: frozenset[str] = frozenset()  # typings names from package.json

    @property
    def identity(self) -> PackageIdentity:
        return PackageIdentity(self.name, self.version)


@dataclass
class SelectionResult:
    """Packages to test: the changed set plus their dependents."""

    package_names: set[str] = field(default_factory=set)
    dependents: list[str] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {
            "packageNames": sorted(self.package_names),
            "dependents": list(self.dependents),
        }
