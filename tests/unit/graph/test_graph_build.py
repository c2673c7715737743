from __future__ import annotations

from pathlib import Path

import pytest

from yeth.errors import DependencyNotFoundError, PathDependencyNotFoundError
from yeth.graph.model import build_graph, validate_paths
from yeth.workspace.models import Application, AppRef, Dependency, PathRef


def _app(root: Path, name: str, *dependencies: Dependency) -> Application:
    return Application(
        name=name,
        directory=root / name,
        manifest_path=root / name / "yeth.toml",
        dependencies=dependencies,
    )


def test_only_app_refs_become_edges(tmp_path: Path) -> None:
    apps = {
        "shared": _app(tmp_path, "shared"),
        "api": _app(
            tmp_path,
            "api",
            PathRef(raw="../config", path=tmp_path / "config"),
            AppRef("shared"),
            AppRef("shared"),
        ),
    }

    graph = build_graph(apps)

    assert graph.names() == ("api", "shared")
    assert graph.dependencies_of("api") == ("shared",)
    assert graph.dependencies_of("shared") == ()
    assert graph.dependents() == {"api": (), "shared": ("api",)}


def test_unresolved_app_ref_names_target_and_referrer(tmp_path: Path) -> None:
    apps = {"web": _app(tmp_path, "web", AppRef("missing"))}

    with pytest.raises(DependencyNotFoundError) as excinfo:
        build_graph(apps)

    assert excinfo.value.dependency == "missing"
    assert excinfo.value.referrer == "web"
    assert str(excinfo.value) == "Application dependency 'missing' for 'web' not found"


def test_missing_path_dependency_is_reported(tmp_path: Path) -> None:
    (tmp_path / "present.json").write_text("{}", encoding="utf-8")
    apps = {
        "web": _app(
            tmp_path,
            "web",
            PathRef(raw="../present.json", path=tmp_path / "present.json"),
            PathRef(raw="../absent", path=tmp_path / "absent"),
        )
    }

    with pytest.raises(PathDependencyNotFoundError) as excinfo:
        validate_paths(apps)

    assert excinfo.value.path == tmp_path / "absent"
    assert excinfo.value.referrer == "web"


def test_subgraph_drops_edges_leaving_the_selection(tmp_path: Path) -> None:
    apps = {
        "a": _app(tmp_path, "a"),
        "b": _app(tmp_path, "b", AppRef("a")),
        "c": _app(tmp_path, "c", AppRef("b"), AppRef("a")),
    }

    sub = build_graph(apps).subgraph({"b", "c"})

    assert sub.names() == ("b", "c")
    assert sub.dependencies_of("c") == ("b",)
    assert sub.dependencies_of("b") == ()
