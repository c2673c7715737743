"""Human-facing and JSON renderings of the dependency graph."""

from __future__ import annotations

from collections.abc import Mapping

from yeth.workspace.models import Application, AppRef, Dependency, PathRef


def dependency_kind(dep: Dependency) -> str:
    """Return the display tag for a dependency: app, file or dir."""
    if isinstance(dep, AppRef):
        return "app"
    if isinstance(dep, PathRef):
        return "file" if dep.path.is_file() else "dir"
    raise TypeError(f"Unsupported dependency type: {type(dep).__name__}")


def dependency_label(dep: Dependency) -> str:
    """Return the declared text of a dependency."""
    if isinstance(dep, AppRef):
        return dep.name
    if isinstance(dep, PathRef):
        return dep.raw
    raise TypeError(f"Unsupported dependency type: {type(dep).__name__}")


def render_graph(apps: Mapping[str, Application]) -> str:
    """Render each application and its tagged dependencies as a text tree."""
    lines = ["Dependency graph:", ""]
    for name in sorted(apps):
        app = apps[name]
        lines.append(name)
        if not app.dependencies:
            lines.append("  └─ (no dependencies)")
        for index, dep in enumerate(app.dependencies):
            prefix = "└─" if index == len(app.dependencies) - 1 else "├─"
            lines.append(f"  {prefix} {dependency_label(dep)} ({dependency_kind(dep)})")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def graph_payload(apps: Mapping[str, Application]) -> dict[str, object]:
    """Return a serializable graph snapshot keyed by application name."""
    return {
        "applications": {
            name: {
                "directory": apps[name].directory.as_posix(),
                "dependencies": [
                    {"name": dependency_label(dep), "kind": dependency_kind(dep)}
                    for dep in apps[name].dependencies
                ],
                "exclude": list(apps[name].exclude_patterns),
            }
            for name in sorted(apps)
        }
    }
