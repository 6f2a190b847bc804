"""Affected packages: what the diff touches, plus everything depending on it.

Dependency edges come from each package's ``package.json`` (``@types/*``
entries), as recorded by the catalog.
"""

from __future__ import annotations

from collections import deque
from typing import Iterable

from .catalog import PackageCatalog
from .layout import PackageResolver, package_from_file
from .models import ChangeEntry, ChangeStatus, PackageIdentity, SelectionResult, TypingsPackage


def find_affected_packages(
    catalog: PackageCatalog,
    deletions: Iterable[PackageIdentity],
    changes: Iterable[ChangeEntry] = (),
    resolve: PackageResolver = package_from_file,
) -> SelectionResult:
    """Changed surviving packages and the transitive dependents of changed or deleted ones."""
    changed: dict[str, TypingsPackage] = {}
    for change in changes:
        if change.status is ChangeStatus.DELETED:
            continue
        identity = resolve(change.file)
        if identity is None:
            continue
        typing = catalog.get_typing(identity)
        if typing is not None:
            changed.setdefault(typing.sub_directory_path, typing)

    roots = {typing.name for typing in changed.values()}
    roots.update(identity.name for identity in deletions)

    package_names = set(changed)
    dependents = sorted(transitive_dependents(catalog.all_typings(), roots) - package_names)
    return SelectionResult(package_names=package_names, dependents=dependents)


def transitive_dependents(typings: Iterable[TypingsPackage], roots: Iterable[str]) -> set[str]:
    """Paths of every package depending, directly or indirectly, on a root name.

    BFS on the reverse dependency graph: if A depends on B, changing B
    affects A.
    """
    reverse_adj: dict[str, list[TypingsPackage]] = {}
    for typing in typings:
        for dependency in typing.dependencies:
            reverse_adj.setdefault(dependency, []).append(typing)

    visited: set[str] = set()
    seen_names: set[str] = set()
    queue: deque[str] = deque(roots)
    while queue:
        name = queue.popleft()
        if name in seen_names:
            continue
        seen_names.add(name)
        for typing in reverse_adj.get(name, []):
            if typing.sub_directory_path in visited:
                continue
            visited.add(typing.sub_directory_path)
            queue.append(typing.name)

    return visited
