"""Deprecation validation.

A package listed in the deprecation manifest (``notNeededPackages.json``) is
removed from the repository because the library now ships its own types.
Validation runs in three phases, each fatal on failure:

1. Group the deleted files by package. Every deleted file has to belong to a
   package directory.
2. Check each deleted package against the catalog: a package that still has
   files must not be in the manifest yet.
3. Check each remaining manifest entry against the registry:
   - ``libraryName@asOfVersion`` must exist;
   - ``asOfVersion`` must be newer than the latest published ``@types`` version.
"""

from __future__ import annotations

from typing import Iterable, Protocol

from .exceptions import (
    ConflictingDeprecationStateError,
    InvalidVersionError,
    ReplacementNotFoundError,
    ReplacementVersionNotFoundError,
    UnexpectedRegistryError,
    UnmappedDeletedFileError,
    VersionNotNewerError,
)
from .layout import PackageResolver, package_from_file
from .logging_config import get_logger
from .models import ChangeEntry, ChangeStatus, DeprecationRecord, PackageIdentity
from .registry import Manifest, NotFound, NotTarget, RegistryFailure, RegistryResult
from .semver import SemVer
from .versions import WILDCARD

logger = get_logger(__name__)


class DeprecationCatalog(Protocol):
    def has_typing_for(self, identity: PackageIdentity) -> bool: ...

    def get_not_needed_package(self, name: str) -> DeprecationRecord | None: ...


class ManifestFetcher(Protocol):
    def fetch_manifest(self, name: str, version: str | None = None) -> RegistryResult: ...


def deleted_package_names(
    changes: Iterable[ChangeEntry],
    resolve: PackageResolver = package_from_file,
) -> list[str]:
    """Distinct names of packages with deleted files, in first-seen order.

    Raises:
        UnmappedDeletedFileError: If a deleted file is outside every package.
    """
    names: dict[str, None] = {}
    for change in changes:
        if change.status is not ChangeStatus.DELETED:
            continue
        identity = resolve(change.file)
        if identity is None:
            raise UnmappedDeletedFileError(change.file)
        names.setdefault(identity.name, None)
    return list(names)


def find_deprecations(
    catalog: DeprecationCatalog,
    changes: Iterable[ChangeEntry],
    resolve: PackageResolver = package_from_file,
    manifest_file: str = "notNeededPackages.json",
) -> list[DeprecationRecord]:
    """Deprecation records for packages this diff removes completely.

    Raises:
        UnmappedDeletedFileError: If a deleted file is outside every package.
        ConflictingDeprecationStateError: If a package is in the manifest but
            still has files.
    """
    records: list[DeprecationRecord] = []
    for name in deleted_package_names(changes, resolve):
        has_typing = catalog.has_typing_for(PackageIdentity(name, WILDCARD))
        not_needed = catalog.get_not_needed_package(name)
        if has_typing:
            if not_needed is not None:
                raise ConflictingDeprecationStateError(name, manifest_file)
            # Partial deletion: a version directory or some files went away.
            continue
        if not_needed is not None:
            records.append(not_needed)
    return records


def check_deprecation(
    record: DeprecationRecord,
    registry: ManifestFetcher,
    manifest_file: str = "notNeededPackages.json",
) -> None:
    """Validate one manifest entry against the registry.

    Raises:
        ReplacementNotFoundError: ``libraryName`` is not on the registry.
        ReplacementVersionNotFoundError: ``asOfVersion`` is not published.
        VersionNotNewerError: ``asOfVersion`` does not exceed the published
            typings version.
        UnexpectedRegistryError: Any other registry failure.
        InvalidVersionError: A version is not valid semver.
    """
    replacement_version = _parse_version(record.library_name, record.version, manifest_file)

    replacement = registry.fetch_manifest(record.library_name, record.version)
    if isinstance(replacement, NotFound):
        raise ReplacementNotFoundError(
            record.full_registry_name, record.library_name, manifest_file
        ) from replacement.error
    if isinstance(replacement, NotTarget):
        raise ReplacementVersionNotFoundError(record.library_name, record.version) from replacement.error
    if isinstance(replacement, RegistryFailure):
        raise UnexpectedRegistryError(record.library_name, str(replacement.error)) from replacement.error
    _ensure_manifest(replacement)

    typings = registry.fetch_manifest(record.full_registry_name)
    if isinstance(typings, NotFound):
        raise UnexpectedRegistryError(
            record.full_registry_name, "types package not found"
        ) from typings.error
    if isinstance(typings, (NotTarget, RegistryFailure)):
        raise UnexpectedRegistryError(record.full_registry_name, str(typings.error)) from typings.error
    _ensure_manifest(typings)

    published_version = _parse_version(record.full_registry_name, typings.version, manifest_file)
    if not replacement_version > published_version:
        raise VersionNotNewerError(
            record.library_name, record.version, record.full_registry_name, typings.version
        )
    logger.info(
        "%s replaces %s@%s with %s@%s",
        record.typings_name,
        record.full_registry_name,
        typings.version,
        record.library_name,
        record.version,
    )


def validate_deprecations(
    records: Iterable[DeprecationRecord],
    registry: ManifestFetcher,
    manifest_file: str = "notNeededPackages.json",
) -> list[DeprecationRecord]:
    """Check every record in order, stopping at the first failure."""
    checked: list[DeprecationRecord] = []
    for record in records:
        check_deprecation(record, registry, manifest_file)
        checked.append(record)
    return checked


def _ensure_manifest(result: RegistryResult) -> None:
    if not isinstance(result, Manifest):
        raise TypeError(f"Unhandled registry result: {result!r}")


def _parse_version(package: str, version: str, manifest_file: str) -> SemVer:
    try:
        return SemVer.parse(version)
    except ValueError as e:
        raise InvalidVersionError(package, version, manifest_file) from e
