"""Select the packages to test for the pending change.

Selection modes:
    ``"all"``       every typings package in the repository
    ``"affected"``  packages touched by the diff plus their dependents
    a pattern       every typings package whose name matches

If the diff touches the deprecation manifest, every deprecation it implies
is validated against the registry first; any failure aborts the selection.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Callable, Iterable, Literal, Optional, Union

from .catalog import PackageCatalog
from .config import DEFAULT_CONFIG, GateConfig
from .deprecations import ManifestFetcher, find_deprecations, validate_deprecations
from .dependents import find_affected_packages
from .git import git_diff
from .grouping import group_deletions
from .layout import PackageResolver, make_resolver
from .logging_config import get_logger
from .models import ChangeEntry, PackageIdentity, SelectionResult
from .registry import RegistryClient

logger = get_logger(__name__)

Selection = Union[Literal["all", "affected"], re.Pattern]
DiffSource = Callable[[Union[str, Path], GateConfig], list[ChangeEntry]]
AffectedFinder = Callable[[PackageCatalog, list[PackageIdentity], list[ChangeEntry]], SelectionResult]


def parse_selection(text: str) -> Selection:
    """CLI text to a selection; anything but ``all``/``affected`` is a regex."""
    if text in ("all", "affected"):
        return text  # type: ignore[return-value]
    return re.compile(text)


def touches_manifest(changes: Iterable[ChangeEntry], config: GateConfig = DEFAULT_CONFIG) -> bool:
    return any(change.file == config.not_needed_file for change in changes)


def get_affected_packages_from_diff(
    catalog: PackageCatalog,
    repo_path: str | Path,
    selection: Selection,
    *,
    config: GateConfig = DEFAULT_CONFIG,
    registry: Optional[ManifestFetcher] = None,
    diff_source: DiffSource = git_diff,
    find_affected: Optional[AffectedFinder] = None,
    resolve: Optional[PackageResolver] = None,
) -> SelectionResult:
    """Diff the repository, validate deprecations if needed, and select packages.

    Raises:
        GateError: Any diff, layout, consistency or registry failure.
    """
    resolve = resolve or make_resolver(config.types_dir)
    changes = diff_source(repo_path, config)

    if touches_manifest(changes, config):
        records = find_deprecations(catalog, changes, resolve, config.not_needed_file)
        if registry is not None:
            validate_deprecations(records, registry, config.not_needed_file)
        else:
            with RegistryClient(config.registry_url, config.registry_timeout_seconds) as client:
                validate_deprecations(records, client, config.not_needed_file)

    affected = select_packages(catalog, changes, selection, find_affected=find_affected, resolve=resolve)

    logger.info(
        "Testing %d changed packages: %s", len(affected.package_names), sorted(affected.package_names)
    )
    logger.info("Testing %d dependent packages: %s", len(affected.dependents), json.dumps(affected.dependents))
    return affected


def select_packages(
    catalog: PackageCatalog,
    changes: list[ChangeEntry],
    selection: Selection,
    *,
    find_affected: Optional[AffectedFinder] = None,
    resolve: Optional[PackageResolver] = None,
) -> SelectionResult:
    """Apply a selection mode to an already-resolved diff."""
    if selection == "all":
        return SelectionResult(
            package_names={typing.sub_directory_path for typing in catalog.all_typings()},
            dependents=[],
        )
    if selection == "affected":
        resolve = resolve or make_resolver()
        deletions = group_deletions(changes, resolve)
        if find_affected is None:
            return find_affected_packages(catalog, deletions, changes, resolve)
        return find_affected(catalog, deletions, changes)
    if isinstance(selection, re.Pattern):
        return SelectionResult(
            package_names={
                typing.sub_directory_path for typing in catalog.all_typings() if selection.search(typing.name)
            },
            dependents=[],
        )
    raise ValueError(f"Unknown selection: {selection!r}")
