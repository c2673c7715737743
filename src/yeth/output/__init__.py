"""Result consumers: graph rendering and version files."""

from .render import dependency_kind, dependency_label, graph_payload, render_graph
from .versions import VERSION_FILE, format_digest, write_versions

__all__ = [
    "VERSION_FILE",
    "dependency_kind",
    "dependency_label",
    "format_digest",
    "graph_payload",
    "render_graph",
    "write_versions",
]
