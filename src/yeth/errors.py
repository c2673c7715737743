"""Structured error taxonomy with stable codes."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class YethError(Exception):
    """Base class for every failure surfaced by yeth."""

    code = "YETH_ERROR"

    @property
    def message(self) -> str:
        """Return a human-readable description."""
        return self.code

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, object]:
        """Return a serializable error envelope."""
        return {"code": self.code, "message": self.message}


@dataclass(slots=True, frozen=True)
class ConfigParseError(YethError):
    """Raised when a manifest cannot be parsed or has wrong field types."""

    path: Path
    detail: str
    code = "CONFIG_PARSE_ERROR"

    @property
    def message(self) -> str:
        return f"Failed to parse manifest '{self.path}': {self.detail}"


@dataclass(slots=True, frozen=True)
class DuplicateApplicationError(YethError):
    """Raised when two manifests resolve to the same application name."""

    name: str
    first: Path
    second: Path
    code = "DUPLICATE_APPLICATION"

    @property
    def message(self) -> str:
        return f"Application '{self.name}' is declared twice: '{self.first}' and '{self.second}'"


@dataclass(slots=True, frozen=True)
class InvalidApplicationDirectoryError(YethError):
    """Raised when an application root is not an existing directory."""

    path: Path
    code = "INVALID_APPLICATION_DIRECTORY"

    @property
    def message(self) -> str:
        return f"Application directory '{self.path}' does not exist or is not a directory"


@dataclass(slots=True, frozen=True)
class DependencyNotFoundError(YethError):
    """Raised when an application reference does not resolve."""

    dependency: str
    referrer: str
    code = "DEPENDENCY_NOT_FOUND"

    @property
    def message(self) -> str:
        return f"Application dependency '{self.dependency}' for '{self.referrer}' not found"


@dataclass(slots=True, frozen=True)
class PathDependencyNotFoundError(YethError):
    """Raised when a path dependency target is missing on disk."""

    path: Path
    referrer: str
    code = "PATH_DEPENDENCY_NOT_FOUND"

    @property
    def message(self) -> str:
        return f"Path dependency '{self.path}' for '{self.referrer}' not found"


@dataclass(slots=True, frozen=True)
class CircularDependencyError(YethError):
    """Raised when application references form a cycle."""

    cycle: tuple[str, ...]
    code = "CIRCULAR_DEPENDENCY"

    @property
    def message(self) -> str:
        if not self.cycle:
            return "Circular dependency detected"
        return f"Circular dependency detected: {' -> '.join(self.cycle)}"


@dataclass(slots=True, frozen=True)
class NoApplicationsFoundError(YethError):
    """Raised when discovery finds no manifests under the root."""

    root: Path
    code = "NO_APPLICATIONS_FOUND"

    @property
    def message(self) -> str:
        return f"No applications found under '{self.root}'"


@dataclass(slots=True, frozen=True)
class ApplicationNotFoundError(YethError):
    """Raised when a requested application is not part of the workspace."""

    name: str
    code = "APPLICATION_NOT_FOUND"

    @property
    def message(self) -> str:
        return f"Application '{self.name}' not found"


@dataclass(slots=True, frozen=True)
class NotFileOrDirectoryError(YethError):
    """Raised when a digest target is neither a regular file nor a directory."""

    path: Path
    code = "NOT_FILE_OR_DIRECTORY"

    @property
    def message(self) -> str:
        return f"Path '{self.path}' is neither a file nor a directory"


@dataclass(slots=True, frozen=True)
class DigestIOError(YethError):
    """Raised when the filesystem fails while digesting content."""

    path: Path
    reason: str
    code = "DIGEST_IO_ERROR"

    @property
    def message(self) -> str:
        return f"I/O failure on '{self.path}': {self.reason}"


@dataclass(slots=True, frozen=True)
class IncorrectOrderError(YethError):
    """Raised when a dependency digest is requested before it was recorded."""

    name: str
    dependency: str
    code = "INCORRECT_ORDER"

    @property
    def message(self) -> str:
        return (
            f"Dependency '{self.dependency}' of '{self.name}' was not processed "
            "before its dependent"
        )


@dataclass(slots=True, frozen=True)
class EngineConfigError(YethError):
    """Raised when engine configuration values are invalid."""

    detail: str
    code = "ENGINE_CONFIG_ERROR"

    @property
    def message(self) -> str:
        return self.detail
