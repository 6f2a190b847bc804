"""npm registry client.

Lookups never raise for registry outcomes. ``fetch_manifest`` returns one of
``Manifest``, ``NotFound``, ``NotTarget`` or ``RegistryFailure`` and callers
match on the type. Each failure variant carries the original error so it can
be chained as the cause of a gate error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union
from urllib.parse import quote

import httpx

from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"

# Abbreviated packument: versions and dist-tags only.
_ACCEPT = "application/vnd.npm.install-v1+json; q=1.0, application/json; q=0.8"


class RegistryLookupError(Exception):
    """A registry miss, tagged with npm's error code (``E404`` or ``ETARGET``)."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code


@dataclass(frozen=True)
class Manifest:
    name: str
    version: str
    data: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class NotFound:
    """No package with this name."""

    name: str
    error: Exception = field(compare=False)


@dataclass(frozen=True)
class NotTarget:
    """The package exists but not at the requested version."""

    name: str
    version: str
    error: Exception = field(compare=False)


@dataclass(frozen=True)
class RegistryFailure:
    """Any other failure: HTTP status, transport, malformed response."""

    name: str
    error: Exception = field(compare=False)


RegistryResult = Union[Manifest, NotFound, NotTarget, RegistryFailure]


class RegistryClient:
    """Fetch package manifests from an npm-compatible registry over HTTP."""

    def __init__(
        self,
        base_url: str = DEFAULT_REGISTRY_URL,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def __enter__(self) -> "RegistryClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def package_url(self, name: str) -> str:
        # Scoped names keep the "@" but escape the slash: @babel%2Fparser
        return f"{self._base_url}/{quote(name, safe='@')}"

    def fetch_manifest(self, name: str, version: Optional[str] = None) -> RegistryResult:
        """Manifest of *name* at *version* (exact version or dist-tag), or at ``latest``."""
        wanted = version or "latest"
        url = self.package_url(name)
        logger.debug("GET %s (%s)", url, wanted)

        try:
            response = self._client.get(url, headers={"Accept": _ACCEPT})
            if response.status_code == 404:
                return NotFound(name, RegistryLookupError("E404", f"404 Not Found - GET {url}"))
            response.raise_for_status()
            packument = response.json()
        except (httpx.HTTPError, ValueError) as e:
            return RegistryFailure(name, e)

        return _select_version(name, packument, wanted)


def _select_version(name: str, packument: Any, wanted: str) -> RegistryResult:
    if not isinstance(packument, dict):
        return RegistryFailure(name, ValueError(f"Malformed packument for {name}"))

    versions = packument.get("versions") or {}
    dist_tags = packument.get("dist-tags") or {}
    resolved = dist_tags.get(wanted, wanted)

    data = versions.get(resolved)
    if not isinstance(data, dict):
        return NotTarget(
            name,
            wanted,
            RegistryLookupError("ETARGET", f"No matching version found for {name}@{wanted}."),
        )
    return Manifest(name=name, version=str(data.get("version", resolved)), data=data)
