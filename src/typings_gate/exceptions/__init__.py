"""Exception hierarchy for typings-gate."""

from .base import TypingsGateError
from .config import ConfigurationError, InvalidConfigError, InvalidPathError
from .taxonomy import (
    ConflictingDeprecationStateError,
    DiffUnavailableError,
    ErrorCode,
    GateError,
    InvalidVersionError,
    ReplacementNotFoundError,
    ReplacementVersionNotFoundError,
    UnexpectedRegistryError,
    UnmappedDeletedFileError,
    VersionNotNewerError,
)

__all__ = [
    "TypingsGateError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "ErrorCode",
    "GateError",
    "DiffUnavailableError",
    "UnmappedDeletedFileError",
    "ConflictingDeprecationStateError",
    "ReplacementNotFoundError",
    "ReplacementVersionNotFoundError",
    "VersionNotNewerError",
    "UnexpectedRegistryError",
    "InvalidVersionError",
]
