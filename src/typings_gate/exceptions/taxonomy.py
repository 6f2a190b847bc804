"""Gate error taxonomy with error codes.

Error Code Convention:
    TG1xx - Diff errors
    TG2xx - Package layout errors
    TG3xx - Deprecation consistency errors
    TG4xx - Registry errors

Every gate error is fatal: the pipeline stops at the first one raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Structured error codes for CI output and debugging."""

    # Diff errors (TG1xx)
    TG100 = "TG100"  # Git command failed

    # Layout errors (TG2xx)
    TG200 = "TG200"  # Deleted file outside any package

    # Deprecation consistency errors (TG3xx)
    TG300 = "TG300"  # Package both present and deprecated

    # Registry errors (TG4xx)
    TG400 = "TG400"  # Replacement package not on registry
    TG401 = "TG401"  # Replacement version not on registry
    TG402 = "TG402"  # Replacement version not newer than published types
    TG403 = "TG403"  # Unexpected registry failure
    TG404 = "TG404"  # Version string is not valid semver


@dataclass(eq=False)
class GateError(Exception):
    """Base exception with structured context.

    Attributes:
        message: Human-readable error description
        code: Structured error code for categorization
        context: Additional context (file path, package name, versions)
        recovery_hint: Suggested fix for the contributor
    """

    message: str
    code: ErrorCode
    context: dict[str, Any] = field(default_factory=dict)
    recovery_hint: str | None = None

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __post_init__(self) -> None:
        super().__init__(str(self))

    def to_json(self) -> dict[str, Any]:
        """Structured logging format."""
        return {
            "error_code": self.code.value,
            "message": self.message,
            "context": self.context,
            "recovery_hint": self.recovery_hint,
        }


class DiffUnavailableError(GateError):
    """A git command needed to compute the diff failed (TG100)."""

    def __init__(self, command: str, reason: str):
        super().__init__(
            message=f"Git command failed: {command}\n{reason}".rstrip(),
            code=ErrorCode.TG100,
            context={"command": command, "reason": reason},
        )
        self.command = command
        self.reason = reason


class UnmappedDeletedFileError(GateError):
    """A deleted file does not belong to any package directory (TG200)."""

    def __init__(self, file: str):
        super().__init__(
            message=f"Unexpected file deleted: {file}",
            code=ErrorCode.TG200,
            context={"file": file},
            recovery_hint=(
                "When removing packages, you should only delete files that are "
                "a part of removed packages."
            ),
        )
        self.file = file


class ConflictingDeprecationStateError(GateError):
    """A package still has files but is listed as not needed (TG300)."""

    def __init__(self, package: str, manifest_file: str = "notNeededPackages.json"):
        super().__init__(
            message=f"Please delete all files in {package} when adding it to {manifest_file}.",
            code=ErrorCode.TG300,
            context={"package": package, "manifest": manifest_file},
            recovery_hint="Remove the remaining files of the package in the same change.",
        )
        self.package = package


class ReplacementNotFoundError(GateError):
    """The claimed replacement library is not on the registry (TG400)."""

    def __init__(self, full_registry_name: str, library_name: str, manifest_file: str = "notNeededPackages.json"):
        super().__init__(
            message=(
                f"The entry for {full_registry_name} in {manifest_file} has\n"
                f'"libraryName": "{library_name}", but there is no npm package with this name.\n'
                "Unneeded packages have to be replaced with a package on npm."
            ),
            code=ErrorCode.TG400,
            context={"package": full_registry_name, "library_name": library_name},
        )
        self.full_registry_name = full_registry_name
        self.library_name = library_name


class ReplacementVersionNotFoundError(GateError):
    """The claimed replacement version is not published (TG401)."""

    def __init__(self, library_name: str, version: str):
        super().__init__(
            message=f"The specified version {version} of {library_name} is not on npm.",
            code=ErrorCode.TG401,
            context={"library_name": library_name, "version": version},
        )
        self.library_name = library_name
        self.version = version


class VersionNotNewerError(GateError):
    """The replacement version does not exceed the published types version (TG402)."""

    def __init__(self, library_name: str, version: str, full_registry_name: str, published_version: str):
        super().__init__(
            message=(
                f"The specified version {version} of {library_name} must be newer than the version\n"
                f"it is supposed to replace, {published_version} of {full_registry_name}."
            ),
            code=ErrorCode.TG402,
            context={
                "library_name": library_name,
                "version": version,
                "package": full_registry_name,
                "published_version": published_version,
            },
        )
        self.library_name = library_name
        self.version = version
        self.full_registry_name = full_registry_name
        self.published_version = published_version


class UnexpectedRegistryError(GateError):
    """Any registry failure without a dedicated error (TG403)."""

    def __init__(self, package: str, reason: str):
        super().__init__(
            message=f"Unexpected registry error for {package}: {reason}",
            code=ErrorCode.TG403,
            context={"package": package, "reason": reason},
        )
        self.package = package
        self.reason = reason


class InvalidVersionError(GateError):
    """A manifest or registry version cannot be compared as semver (TG404)."""

    def __init__(self, package: str, version: str, manifest_file: str = "notNeededPackages.json"):
        super().__init__(
            message=f"The version {version!r} given for {package} is not a valid semantic version.",
            code=ErrorCode.TG404,
            context={"package": package, "version": version},
            recovery_hint=f'Use a full "major.minor.patch" asOfVersion in {manifest_file}.',
        )
        self.package = package
        self.version = version
