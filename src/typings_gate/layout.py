"""Repository layout: which package a file belongs to.

The directory layout is authoritative::

    types/<name>/index.d.ts          -> (<name>, "*")
    types/<name>/v2/index.d.ts       -> (<name>, 2)
    types/<name>/v2.1/index.d.ts     -> (<name>, 2.1)
    README.md, types/index.d.ts      -> no package
"""

from __future__ import annotations

from typing import Callable, Optional

from .models import PackageIdentity
from .versions import WILDCARD, try_parse_typing_version

PackageResolver = Callable[[str], Optional[PackageIdentity]]


def package_from_file(file: str, types_dir: str = "types") -> Optional[PackageIdentity]:
    """Map a repository-relative path to its package identity, or None."""
    parts = file.replace("\\", "/").strip("/").split("/")
    if len(parts) <= 2:
        # Not inside a package directory at all.
        return None
    types_dir_name, name, sub_dir_name = parts[0], parts[1], parts[2]
    if types_dir_name != types_dir or not name:
        return None
    version = try_parse_typing_version(sub_dir_name) if sub_dir_name.startswith("v") else None
    if version is not None:
        return PackageIdentity(name, version)
    return PackageIdentity(name, WILDCARD)


def make_resolver(types_dir: str = "types") -> PackageResolver:
    """Resolver bound to a configured types directory."""

    def resolve(file: str) -> Optional[PackageIdentity]:
        return package_from_file(file, types_dir)

    return resolve
