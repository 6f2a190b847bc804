"""Configuration loading and management for typings-gate.

Configuration sources are merged in priority order:
    1. Defaults (defined in GateConfig)
    2. Global config (~/.typings-gate.toml)
    3. Project config (./typings-gate.toml)
    4. Explicit config file
    5. Environment variables (TYPINGS_GATE_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(source_branch="main")
    >>> config.source_branch
    'main'
    >>> config.types_package_name("babel__parser")
    '@types/babel__parser'
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import InvalidConfigError, TypingsGateError

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "TYPINGS_GATE_"


@dataclass(frozen=True)
class GateConfig:
    """Settings for one gate run.

    Attributes:
        Git:
            source_branch: Baseline branch the diff is computed against
            remote: Remote to fetch the baseline from in shallow clones
            git_timeout_seconds: Timeout for each git command

        Repository layout:
            types_dir: Top-level directory holding one directory per package
            not_needed_file: Deprecation manifest at the repository root

        Registry:
            types_scope: Scope the typings packages are published under
            registry_url: Base URL of the npm-compatible registry
            registry_timeout_seconds: HTTP timeout for registry requests

        Output control:
            verbosity: Logging verbosity level
    """

    # Git
    source_branch: str = "master"
    remote: str = "origin"
    git_timeout_seconds: int = 120

    # Repository layout
    types_dir: str = "types"
    not_needed_file: str = "notNeededPackages.json"

    # Registry
    types_scope: str = "@types"
    registry_url: str = "https://registry.npmjs.org"
    registry_timeout_seconds: float = 30.0

    # Output control
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.source_branch.strip():
            raise InvalidConfigError("source_branch", self.source_branch, "must not be empty")
        if not self.remote.strip():
            raise InvalidConfigError("remote", self.remote, "must not be empty")
        if self.git_timeout_seconds < 1:
            raise InvalidConfigError("git_timeout_seconds", self.git_timeout_seconds, "must be at least 1")

        if not self.types_dir or "/" in self.types_dir.strip("/"):
            raise InvalidConfigError("types_dir", self.types_dir, "must be a single directory name")
        if not self.not_needed_file:
            raise InvalidConfigError("not_needed_file", self.not_needed_file, "must not be empty")

        if not self.types_scope.startswith("@"):
            raise InvalidConfigError("types_scope", self.types_scope, "must start with '@'")
        if not self.registry_url.startswith(("http://", "https://")):
            raise InvalidConfigError("registry_url", self.registry_url, "must be an http(s) URL")
        if self.registry_timeout_seconds <= 0:
            raise InvalidConfigError(
                "registry_timeout_seconds", self.registry_timeout_seconds, "must be positive"
            )

        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "expected quiet/normal/verbose")

    def types_package_name(self, typings_name: str) -> str:
        """Full registry name of the typings package for a directory name."""
        return f"{self.types_scope}/{typings_name}"


# Default configuration (singleton)
DEFAULT_CONFIG = GateConfig()


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> GateConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep lower-priority values.

    Returns:
        Validated GateConfig instance

    Raises:
        TypingsGateError: If a config file is invalid or missing
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".typings-gate.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except Exception as e:
            raise TypingsGateError(f"Invalid global config '{global_config}': {e}") from e

    project_config = Path.cwd() / "typings-gate.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise TypingsGateError(f"Invalid project config '{project_config}': {e}") from e

    if config_file is not None:
        if not config_file.exists():
            raise TypingsGateError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise TypingsGateError(f"Invalid config file '{config_file}': {e}") from e

    merged.update(_load_env_vars())

    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"

    merged.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return GateConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise TypingsGateError(f"Invalid configuration: {e}") from e


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from TYPINGS_GATE_* environment variables.

    Supported environment variables (one per GateConfig field), e.g.:
        TYPINGS_GATE_SOURCE_BRANCH: str
        TYPINGS_GATE_REMOTE: str
        TYPINGS_GATE_GIT_TIMEOUT_SECONDS: int
        TYPINGS_GATE_REGISTRY_URL: str
        TYPINGS_GATE_REGISTRY_TIMEOUT_SECONDS: float
        TYPINGS_GATE_VERBOSITY: quiet/normal/verbose

    Returns:
        Dict of field_name -> parsed_value for any TYPINGS_GATE_* vars found.
    """
    type_hints = get_type_hints(GateConfig)

    result: dict[str, Any] = {}

    for field_name in GateConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise TypingsGateError(f"Invalid {env_key}: {e}") from e
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the field's type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    A ``[typings-gate]`` table is used when present, otherwise the top level.
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        # Fallback to tomli for Python 3.9-3.10
        import tomli as tomllib  # type: ignore

    with open(path, "rb") as f:
        data = tomllib.load(f)
    section = data.get("typings-gate")
    if isinstance(section, dict):
        return dict(section)
    return data
