"""Dependency graph construction and scheduling."""

from .model import DependencyGraph, build_graph, validate_paths
from .scheduler import dependency_closure, find_cycle, topological_order, wavefronts

__all__ = [
    "DependencyGraph",
    "build_graph",
    "dependency_closure",
    "find_cycle",
    "topological_order",
    "validate_paths",
    "wavefronts",
]
