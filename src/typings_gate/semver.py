"""Semantic version parsing and ordering (semver.org 2.0.0 precedence).

Only comparison is needed: a deprecation's replacement version has to be
strictly newer than the last published typings version.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Tuple, Union

_SEMVER_RE = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)

PrereleaseId = Union[int, str]


@total_ordering
@dataclass(frozen=True)
class SemVer:
    """A parsed semantic version. Build metadata is kept but never compared."""

    major: int
    minor: int
    patch: int
    prerelease: Tuple[PrereleaseId, ...] = ()
    build: Tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> "SemVer":
        match = _SEMVER_RE.match(text.strip())
        if match is None:
            raise ValueError(f"Invalid semantic version: {text!r}")
        prerelease = match.group("prerelease")
        build = match.group("build")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=tuple(_prerelease_id(part) for part in prerelease.split(".")) if prerelease else (),
            build=tuple(build.split(".")) if build else (),
        )

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(str(part) for part in self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash((self.major, self.minor, self.patch, self.prerelease))

    def __lt__(self, other: "SemVer") -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        if (self.major, self.minor, self.patch) != (other.major, other.minor, other.patch):
            return (self.major, self.minor, self.patch) < (other.major, other.minor, other.patch)
        # A release outranks any of its pre-releases.
        if not self.prerelease or not other.prerelease:
            return bool(self.prerelease) and not other.prerelease
        return _compare_prerelease(self.prerelease, other.prerelease) < 0

    def _key(self) -> tuple:
        return (self.major, self.minor, self.patch, self.prerelease)


def _prerelease_id(part: str) -> PrereleaseId:
    return int(part) if part.isdigit() else part


def _compare_prerelease(left: Tuple[PrereleaseId, ...], right: Tuple[PrereleaseId, ...]) -> int:
    for a, b in zip(left, right):
        if a == b:
            continue
        # Numeric identifiers sort before alphanumeric ones.
        if isinstance(a, int) and isinstance(b, int):
            return -1 if a < b else 1
        if isinstance(a, int):
            return -1
        if isinstance(b, int):
            return 1
        return -1 if a < b else 1
    return (len(left) > len(right)) - (len(left) < len(right))
