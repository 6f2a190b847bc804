"""Directory-parsed typings versions (``v1``, ``v1.2``) and their formatting."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Optional, Union

WILDCARD: Literal["*"] = "*"

# Matches a version directory name; the leading "v" is optional so that a
# formatted version re-parses to the same value.
_VERSION_RE = re.compile(r"^v?(\d+)(?:\.(\d+))?$")


@dataclass(frozen=True, order=True)
class TypingVersion:
    """Major (and optional minor) version parsed from a package directory name."""

    major: int
    minor: Optional[int] = None

    def __str__(self) -> str:
        return format_typing_version(self)


DependencyVersion = Union[TypingVersion, Literal["*"]]


def try_parse_typing_version(text: str) -> Optional[TypingVersion]:
    """Parse ``v1``/``v1.2``/``1.2``; return None if *text* is not a version."""
    match = _VERSION_RE.match(text.strip())
    if match is None:
        return None
    major, minor = match.groups()
    return TypingVersion(int(major), int(minor) if minor is not None else None)


def parse_typing_version(text: str) -> TypingVersion:
    """Parse a version directory name, raising ValueError when it is not one."""
    version = try_parse_typing_version(text)
    if version is None:
        raise ValueError(f"Not a typings version: {text!r}")
    return version


def format_typing_version(version: TypingVersion) -> str:
    if version.minor is None:
        return str(version.major)
    return f"{version.major}.{version.minor}"


def format_dependency_version(version: DependencyVersion) -> str:
    """Canonical string for a version or the wildcard marker."""
    if version == WILDCARD:
        return WILDCARD
    return format_typing_version(version)  # type: ignore[arg-type]
