"""Cycle-aware topological scheduling with deterministic tie-breaks."""

from __future__ import annotations

import heapq

from yeth.errors import ApplicationNotFoundError, CircularDependencyError
from yeth.graph.model import DependencyGraph


def topological_order(graph: DependencyGraph) -> list[str]:
    """Order applications so each one follows everything it depends on.

    Uses Kahn's algorithm with a min-heap on names, so unconstrained siblings
    come out alphabetically and repeated runs produce the same order.
    """
    in_degree = {name: len(graph.dependencies_of(name)) for name in graph.nodes}
    dependents = graph.dependents()
    ready = [name for name, degree in in_degree.items() if degree == 0]
    heapq.heapify(ready)
    order: list[str] = []
    while ready:
        name = heapq.heappop(ready)
        order.append(name)
        for dependent in dependents[name]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                heapq.heappush(ready, dependent)
    if len(order) != len(graph.nodes):
        raise CircularDependencyError(cycle=find_cycle(graph, set(graph.nodes) - set(order)))
    return order


def wavefronts(graph: DependencyGraph) -> list[tuple[str, ...]]:
    """Group applications into levels whose dependencies are all in earlier levels."""
    in_degree = {name: len(graph.dependencies_of(name)) for name in graph.nodes}
    dependents = graph.dependents()
    current = sorted(name for name, degree in in_degree.items() if degree == 0)
    levels: list[tuple[str, ...]] = []
    scheduled = 0
    while current:
        levels.append(tuple(current))
        scheduled += len(current)
        following: list[str] = []
        for name in current:
            for dependent in dependents[name]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    following.append(dependent)
        current = sorted(following)
    if scheduled != len(graph.nodes):
        done = {name for level in levels for name in level}
        raise CircularDependencyError(cycle=find_cycle(graph, set(graph.nodes) - done))
    return levels


def find_cycle(graph: DependencyGraph, candidates: set[str]) -> tuple[str, ...]:
    """Return one concrete cycle among candidates, closed on its first member."""
    state: dict[str, int] = {}
    for start in sorted(candidates):
        if state.get(start):
            continue
        path: list[str] = []
        stack: list[tuple[str, int]] = [(start, 0)]
        while stack:
            name, index = stack.pop()
            if index == 0:
                state[name] = 1
                path.append(name)
            deps = [dep for dep in graph.dependencies_of(name) if dep in candidates]
            if index < len(deps):
                stack.append((name, index + 1))
                dep = deps[index]
                if state.get(dep) == 1:
                    return (*path[path.index(dep) :], dep)
                if not state.get(dep):
                    stack.append((dep, 0))
                continue
            state[name] = 2
            path.pop()
    return tuple(sorted(candidates))


def dependency_closure(graph: DependencyGraph, name: str) -> list[str]:
    """Return name and its transitive application dependencies, dependencies first."""
    if name not in graph.nodes:
        raise ApplicationNotFoundError(name=name)
    reachable: set[str] = set()
    pending = [name]
    while pending:
        current = pending.pop()
        if current in reachable:
            continue
        reachable.add(current)
        pending.extend(graph.dependencies_of(current))
    return topological_order(graph.subgraph(reachable))
