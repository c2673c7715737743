"""Typed models for applications and their dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TypeAlias

from yeth.digest.matching import ExclusionRules


@dataclass(slots=True, frozen=True)
class AppRef:
    """Dependency on another application by name."""

    name: str


@dataclass(slots=True, frozen=True)
class PathRef:
    """Dependency on a file or directory relative to the owning application."""

    raw: str
    path: Path


Dependency: TypeAlias = AppRef | PathRef


def classify_dependency(declared: str, app_dir: Path) -> Dependency:
    """Classify a declared dependency string as an app or path reference."""
    if "/" in declared or "\\" in declared or declared.startswith("."):
        return PathRef(raw=declared, path=app_dir / declared.replace("\\", "/"))
    return AppRef(name=declared)


@dataclass(slots=True, frozen=True)
class Application:
    """One application discovered from a manifest."""

    name: str
    directory: Path
    manifest_path: Path
    dependencies: tuple[Dependency, ...] = ()
    exclude_patterns: tuple[str, ...] = ()

    @property
    def exclusion_rules(self) -> ExclusionRules:
        """Return exclusion rules anchored at the application directory."""
        return ExclusionRules(anchor=self.directory, patterns=self.exclude_patterns)

    def app_dependencies(self) -> tuple[str, ...]:
        """Return referenced application names in declaration order."""
        return tuple(dep.name for dep in self.dependencies if isinstance(dep, AppRef))

    def path_dependencies(self) -> tuple[PathRef, ...]:
        """Return path references in declaration order."""
        return tuple(dep for dep in self.dependencies if isinstance(dep, PathRef))
