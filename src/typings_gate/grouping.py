"""Reduce a diff to the package identities it deletes files from."""

from __future__ import annotations

from typing import Iterable

from .layout import PackageResolver, package_from_file
from .models import ChangeEntry, ChangeStatus, PackageIdentity


def group_deletions(
    changes: Iterable[ChangeEntry],
    resolve: PackageResolver = package_from_file,
) -> list[PackageIdentity]:
    """Unique (name, version) identities of every deleted file.

    Files outside a package directory are skipped here; the deprecation
    check rejects them separately. Many files of one package version collapse
    to a single identity, while distinct versions of a name stay distinct.
    Output is grouped by name in first-seen order.
    """
    by_name: dict[str, dict[str, PackageIdentity]] = {}
    for change in changes:
        if change.status is not ChangeStatus.DELETED:
            continue
        identity = resolve(change.file)
        if identity is None:
            continue
        versions = by_name.setdefault(identity.name, {})
        versions.setdefault(identity.formatted_version, identity)

    return [identity for versions in by_name.values() for identity in versions.values()]
