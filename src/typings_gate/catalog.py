"""Package catalog: every typings package present in the repository plus the
deprecation manifest.

The catalog is built fresh per run from the working tree; nothing is cached.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Mapping, Optional

from .config import DEFAULT_CONFIG, GateConfig
from .exceptions import InvalidPathError, TypingsGateError
from .logging_config import get_logger
from .models import DeprecationRecord, PackageIdentity, TypingsPackage
from .versions import WILDCARD, format_dependency_version, try_parse_typing_version

logger = get_logger(__name__)

_DEPENDENCY_FIELDS = ("dependencies", "devDependencies", "peerDependencies")


class PackageCatalog:
    """Lookup structure over the surviving typings and the deprecation manifest."""

    def __init__(
        self,
        typings: Iterable[TypingsPackage] = (),
        not_needed: Optional[Mapping[str, DeprecationRecord]] = None,
    ):
        self._typings: list[TypingsPackage] = list(typings)
        self._not_needed: dict[str, DeprecationRecord] = dict(not_needed or {})
        self._by_name: dict[str, list[TypingsPackage]] = {}
        for typing in self._typings:
            self._by_name.setdefault(typing.name, []).append(typing)

    @classmethod
    def from_repository(cls, repo_path: str | Path, config: GateConfig = DEFAULT_CONFIG) -> "PackageCatalog":
        """Scan ``<repo>/<types_dir>`` and load ``<repo>/<not_needed_file>``."""
        root = Path(repo_path)
        types_root = root / config.types_dir
        if not types_root.is_dir():
            raise InvalidPathError(types_root, f"missing '{config.types_dir}' directory")

        typings: list[TypingsPackage] = []
        for package_dir in sorted(p for p in types_root.iterdir() if p.is_dir()):
            typings.append(_read_package(package_dir, package_dir.name, WILDCARD, config))
            for sub_dir in sorted(p for p in package_dir.iterdir() if p.is_dir()):
                version = try_parse_typing_version(sub_dir.name) if sub_dir.name.startswith("v") else None
                if version is not None:
                    typings.append(_read_package(sub_dir, package_dir.name, version, config))

        not_needed = load_not_needed_packages(root / config.not_needed_file, config)
        logger.debug("Catalog: %d typings, %d not-needed entries", len(typings), len(not_needed))
        return cls(typings, not_needed)

    def all_typings(self) -> list[TypingsPackage]:
        return list(self._typings)

    def has_typing_for(self, identity: PackageIdentity) -> bool:
        """True if *identity* survives; the wildcard matches any version."""
        candidates = self._by_name.get(identity.name, [])
        if identity.version == WILDCARD:
            return bool(candidates)
        wanted = identity.formatted_version
        return any(format_dependency_version(t.version) == wanted for t in candidates)

    def get_typing(self, identity: PackageIdentity) -> Optional[TypingsPackage]:
        """The package directory exactly matching *identity*, if it survives."""
        wanted = identity.formatted_version
        for typing in self._by_name.get(identity.name, []):
            if format_dependency_version(typing.version) == wanted:
                return typing
        return None

    def get_not_needed_package(self, name: str) -> Optional[DeprecationRecord]:
        return self._not_needed.get(name)

    def not_needed_packages(self) -> list[DeprecationRecord]:
        return list(self._not_needed.values())

    def __len__(self) -> int:
        return len(self._typings)


def load_not_needed_packages(path: Path, config: GateConfig = DEFAULT_CONFIG) -> dict[str, DeprecationRecord]:
    """Parse the deprecation manifest; a missing file means no deprecations.

    Expected shape::

        {"packages": {"babel__parser": {"libraryName": "@babel/parser", "asOfVersion": "7.1.0"}}}
    """
    if not path.exists():
        return {}
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise TypingsGateError(f"Cannot read deprecation manifest: {path}", details={"reason": str(e)}) from e

    packages = raw.get("packages") if isinstance(raw, dict) else None
    if not isinstance(packages, dict):
        raise TypingsGateError(
            f"Invalid deprecation manifest: {path}", details={"reason": "missing 'packages' object"}
        )

    records: dict[str, DeprecationRecord] = {}
    for name, entry in packages.items():
        if not isinstance(entry, dict) or "libraryName" not in entry or "asOfVersion" not in entry:
            raise TypingsGateError(
                f"Invalid entry for {name} in {path.name}",
                details={"reason": "expected 'libraryName' and 'asOfVersion'"},
            )
        records[name] = DeprecationRecord(
            typings_name=name,
            library_name=str(entry["libraryName"]),
            version=str(entry["asOfVersion"]),
            full_registry_name=config.types_package_name(name),
        )
    return records


def _read_package(directory: Path, name: str, version, config: GateConfig) -> TypingsPackage:
    relative = f"{config.types_dir}/{name}"
    if version != WILDCARD:
        relative = f"{relative}/{directory.name}"
    return TypingsPackage(
        name=name,
        version=version,
        sub_directory_path=relative,
        dependencies=frozenset(_read_dependencies(directory / "package.json", name, config)),
    )


def _read_dependencies(package_json: Path, own_name: str, config: GateConfig) -> set[str]:
    """Typings names this package depends on, taken from its package.json."""
    if not package_json.exists():
        return set()
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise TypingsGateError(f"Cannot read {package_json}", details={"reason": str(e)}) from e

    prefix = f"{config.types_scope}/"
    names: set[str] = set()
    for field_name in _DEPENDENCY_FIELDS:
        section = data.get(field_name) or {}
        if not isinstance(section, dict):
            continue
        for dependency in section:
            if dependency.startswith(prefix):
                names.add(dependency[len(prefix):])
    names.discard(own_name)
    return names
