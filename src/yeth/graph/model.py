"""Name-keyed dependency graph over application references."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from yeth.errors import DependencyNotFoundError, PathDependencyNotFoundError
from yeth.workspace.models import Application, AppRef, PathRef


@dataclass(slots=True, frozen=True)
class DependencyGraph:
    """Applications keyed by name with dependent -> dependency adjacency lists."""

    nodes: Mapping[str, Application]
    edges: Mapping[str, tuple[str, ...]]

    def names(self) -> tuple[str, ...]:
        """Return node names in sorted order."""
        return tuple(sorted(self.nodes))

    def dependencies_of(self, name: str) -> tuple[str, ...]:
        """Return direct application dependencies of name."""
        return self.edges.get(name, ())

    def dependents(self) -> dict[str, tuple[str, ...]]:
        """Return reverse adjacency: dependency -> sorted dependents."""
        reverse: dict[str, list[str]] = {name: [] for name in self.nodes}
        for name in sorted(self.edges):
            for dependency in self.edges[name]:
                reverse[dependency].append(name)
        return {name: tuple(sorted(items)) for name, items in reverse.items()}

    def subgraph(self, names: set[str] | frozenset[str]) -> DependencyGraph:
        """Return the graph restricted to the given names."""
        return DependencyGraph(
            nodes={name: self.nodes[name] for name in sorted(names)},
            edges={
                name: tuple(dep for dep in self.edges.get(name, ()) if dep in names)
                for name in sorted(names)
            },
        )


def build_graph(apps: Mapping[str, Application]) -> DependencyGraph:
    """Build the application graph, failing on unresolved application references."""
    edges: dict[str, tuple[str, ...]] = {}
    for name in sorted(apps):
        app = apps[name]
        targets: list[str] = []
        for dep in app.dependencies:
            if isinstance(dep, AppRef):
                if dep.name not in apps:
                    raise DependencyNotFoundError(dependency=dep.name, referrer=name)
                if dep.name not in targets:
                    targets.append(dep.name)
            elif isinstance(dep, PathRef):
                continue
            else:
                raise TypeError(f"Unsupported dependency type: {type(dep).__name__}")
        edges[name] = tuple(targets)
    return DependencyGraph(nodes=dict(sorted(apps.items())), edges=edges)


def validate_paths(apps: Mapping[str, Application]) -> None:
    """Confirm every path reference exists on disk."""
    for name in sorted(apps):
        for dep in apps[name].path_dependencies():
            if not dep.path.exists():
                raise PathDependencyNotFoundError(path=dep.path, referrer=name)
