"""Hash propagation over the application dependency graph."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterator, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from yeth.config import EngineConfig
from yeth.digest.hashing import digest_directory, digest_path, fold_digests
from yeth.errors import (
    ApplicationNotFoundError,
    IncorrectOrderError,
    NoApplicationsFoundError,
    YethError,
)
from yeth.graph import (
    DependencyGraph,
    build_graph,
    dependency_closure,
    topological_order,
    validate_paths,
    wavefronts,
)
from yeth.logging import JsonlRunLogger, RunEvent, new_run_id, utc_timestamp
from yeth.workspace import Application, AppRef, PathRef, discover_applications


@dataclass(slots=True, frozen=True)
class HashResult:
    """Completed mapping of application name to final digest."""

    digests: Mapping[str, str]

    @classmethod
    def from_pairs(cls, pairs: Mapping[str, str]) -> HashResult:
        """Freeze a completed name -> digest mapping."""
        return cls(digests=MappingProxyType(dict(sorted(pairs.items()))))

    def lookup(self, name: str) -> str:
        """Return the digest for name or raise ApplicationNotFoundError."""
        digest = self.digests.get(name)
        if digest is None:
            raise ApplicationNotFoundError(name=name)
        return digest

    def short(self, name: str, length: int) -> str:
        """Return the digest for name truncated to length characters."""
        return self.lookup(name)[:length]

    def names(self) -> tuple[str, ...]:
        """Return application names in sorted order."""
        return tuple(sorted(self.digests))

    def items(self) -> list[tuple[str, str]]:
        """Return (name, digest) pairs sorted by name."""
        return [(name, self.digests[name]) for name in self.names()]

    def as_dict(self) -> dict[str, str]:
        """Return a plain dict copy sorted by name."""
        return dict(self.items())

    def __len__(self) -> int:
        return len(self.digests)

    def __contains__(self, name: object) -> bool:
        return name in self.digests

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())


class DigestArena:
    """Write-once name -> digest table populated in dependency order."""

    def __init__(self) -> None:
        self._digests: dict[str, str] = {}
        self._lock = threading.Lock()

    def record(self, name: str, digest: str) -> None:
        with self._lock:
            if name in self._digests:
                raise RuntimeError(f"Digest for '{name}' recorded twice")
            self._digests[name] = digest

    def get(self, name: str, dependent: str) -> str:
        with self._lock:
            digest = self._digests.get(name)
        if digest is None:
            raise IncorrectOrderError(name=dependent, dependency=name)
        return digest

    def freeze(self) -> HashResult:
        with self._lock:
            return HashResult.from_pairs(self._digests)


def hash_application(app: Application, resolved: DigestArena, workers: int = 1) -> str:
    """Compute one application's final digest from its tree and its dependencies."""
    rules = app.exclusion_rules
    own = digest_directory(app.directory, rules, workers=workers)
    dependency_digests: list[str] = []
    for dep in app.dependencies:
        if isinstance(dep, AppRef):
            dependency_digests.append(resolved.get(dep.name, app.name))
        elif isinstance(dep, PathRef):
            dependency_digests.append(digest_path(dep.path, rules, workers=workers))
        else:
            raise TypeError(f"Unsupported dependency type: {type(dep).__name__}")
    return fold_digests(own, dependency_digests)


def propagate(
    graph: DependencyGraph, order: list[str] | None = None, workers: int = 1
) -> HashResult:
    """Hash graph nodes so dependencies are always recorded before dependents.

    With a single worker, nodes are processed one by one in `order` (the full
    topological order when omitted). With more workers, each wavefront is
    hashed concurrently and fully recorded before the next one starts; the
    output is identical to the sequential run.
    """
    arena = DigestArena()
    if workers <= 1:
        for name in order if order is not None else topological_order(graph):
            arena.record(name, hash_application(graph.nodes[name], arena))
        return arena.freeze()

    levels = wavefronts(graph)
    if order is not None:
        selected = set(order)
        levels = [tuple(name for name in level if name in selected) for level in levels]
    with ThreadPoolExecutor(max_workers=workers) as pool:
        for level in levels:
            if not level:
                continue
            if len(level) == 1:
                name = level[0]
                arena.record(name, hash_application(graph.nodes[name], arena, workers=workers))
                continue
            digests = list(
                pool.map(lambda name: hash_application(graph.nodes[name], arena), level)
            )
            for name, digest in zip(level, digests, strict=True):
                arena.record(name, digest)
    return arena.freeze()


def compute_hashes(
    apps: Mapping[str, Application], config: EngineConfig | None = None
) -> HashResult:
    """Compute final digests for every application.

    Validation runs to completion before any file is hashed: unresolved
    application references, missing path targets and cycles all abort the run.
    """
    if not apps:
        raise NoApplicationsFoundError(root=config.root if config is not None else Path("."))
    graph = build_graph(apps)
    validate_paths(apps)
    order = topological_order(graph)
    workers = config.workers if config is not None else 1
    return propagate(graph, order=order, workers=workers)


class HashEngine:
    """Discovery, validation and hashing for one workspace root."""

    def __init__(self, config: EngineConfig, run_logger: JsonlRunLogger | None = None) -> None:
        self._config = config
        self._run_logger = run_logger
        if self._run_logger is None and config.run_log is not None:
            self._run_logger = JsonlRunLogger(config.run_log)

    @property
    def config(self) -> EngineConfig:
        """Return the effective engine configuration."""
        return self._config

    def discover(self) -> dict[str, Application]:
        """Discover applications under the configured root."""
        apps = discover_applications(self._config.root)
        if not apps:
            raise NoApplicationsFoundError(root=self._config.root)
        return apps

    def graph(self, apps: Mapping[str, Application] | None = None) -> DependencyGraph:
        """Return the validated dependency graph."""
        resolved_apps = apps if apps is not None else self.discover()
        graph = build_graph(resolved_apps)
        validate_paths(resolved_apps)
        topological_order(graph)
        return graph

    def compute_all(self, apps: Mapping[str, Application] | None = None) -> HashResult:
        """Compute digests for every application in the workspace."""

        def run() -> HashResult:
            resolved_apps = apps if apps is not None else self.discover()
            return compute_hashes(resolved_apps, self._config)

        return self._logged("compute_all", run, metadata={})

    def compute_for(
        self, name: str, apps: Mapping[str, Application] | None = None
    ) -> HashResult:
        """Compute digests for one application and its dependency closure only."""

        def run() -> HashResult:
            resolved_apps = apps if apps is not None else self.discover()
            if name not in resolved_apps:
                raise ApplicationNotFoundError(name=name)
            graph = self.graph(resolved_apps)
            closure = dependency_closure(graph, name)
            return propagate(graph, order=closure, workers=self._config.workers)

        return self._logged("compute_for", run, metadata={"app": name})

    def lookup(self, name: str, apps: Mapping[str, Application] | None = None) -> str:
        """Return the final digest of one application."""
        return self.compute_for(name, apps).lookup(name)

    def _logged(
        self, operation: str, run: Callable[[], HashResult], metadata: dict[str, object]
    ) -> HashResult:
        started = time.perf_counter()
        try:
            result = run()
        except YethError as exc:
            self._log(
                operation, started, ok=False, error_code=exc.code, app_count=0, metadata=metadata
            )
            raise
        self._log(
            operation, started, ok=True, error_code=None, app_count=len(result), metadata=metadata
        )
        return result

    def _log(
        self,
        operation: str,
        started: float,
        *,
        ok: bool,
        error_code: str | None,
        app_count: int,
        metadata: dict[str, object],
    ) -> None:
        if self._run_logger is None:
            return
        self._run_logger.append(
            RunEvent(
                timestamp=utc_timestamp(),
                run_id=new_run_id(),
                operation=operation,
                root=str(self._config.root),
                ok=ok,
                error_code=error_code,
                app_count=app_count,
                duration_ms=int((time.perf_counter() - started) * 1000),
                metadata=dict(metadata),
            )
        )
