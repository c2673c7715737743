from __future__ import annotations

from pathlib import Path

import pytest

from yeth.errors import ConfigParseError
from yeth.workspace.manifest import parse_manifest
from yeth.workspace.models import AppRef, PathRef, classify_dependency


def _manifest(directory: Path, *lines: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "yeth.toml"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_parse_manifest_classifies_dependencies_in_order(tmp_path: Path) -> None:
    path = _manifest(
        tmp_path / "backend",
        "[app]",
        'dependencies = ["common", "../config/db.json", "./build.rs", "sub/dir", ".env"]',
        'exclude = ["target", "../config/local.json"]',
    )

    app = parse_manifest(path)
    directory = (tmp_path / "backend").resolve()

    assert app.name == "backend"
    assert app.directory == directory
    assert app.manifest_path == path.resolve()
    assert app.dependencies == (
        AppRef(name="common"),
        PathRef(raw="../config/db.json", path=directory / "../config/db.json"),
        PathRef(raw="./build.rs", path=directory / "./build.rs"),
        PathRef(raw="sub/dir", path=directory / "sub/dir"),
        PathRef(raw=".env", path=directory / ".env"),
    )
    assert app.exclude_patterns == ("target", "../config/local.json")
    assert app.app_dependencies() == ("common",)
    assert len(app.path_dependencies()) == 4


def test_parse_manifest_defaults_to_empty_lists(tmp_path: Path) -> None:
    app = parse_manifest(_manifest(tmp_path / "shared", "[app]"))

    assert app.dependencies == ()
    assert app.exclude_patterns == ()


def test_parse_manifest_accepts_explicit_name(tmp_path: Path) -> None:
    app = parse_manifest(_manifest(tmp_path / "web", "[app]", 'name = "storefront"'))

    assert app.name == "storefront"
    assert app.directory.name == "web"


def test_classify_backslash_paths_as_path_refs(tmp_path: Path) -> None:
    dep = classify_dependency(r"..\lib", tmp_path)

    assert dep == PathRef(raw=r"..\lib", path=tmp_path / "../lib")


@pytest.mark.parametrize(
    ("lines", "detail"),
    [
        (("[app",), "yeth.toml"),
        (('title = "x"',), "missing [app] table"),
        (('app = "x"',), "'app' must be a table"),
        (("[app]", 'dependencies = "shared"'), "'app.dependencies' must be a list of strings"),
        (("[app]", "dependencies = [1, 2]"), "'app.dependencies' must contain only strings"),
        (("[app]", 'dependencies = ["  "]'), "must not contain empty strings"),
        (("[app]", "exclude = [true]"), "'app.exclude' must contain only strings"),
        (("[app]", 'exclude = ["/tmp"]'), "'app.exclude' entry '/tmp' must be a relative path"),
        (("[app]", "exclude = ['C:\\build']"), "must be a relative path"),
        (("[app]", "name = 3"), "'app.name' must be a non-empty string"),
    ],
)
def test_parse_manifest_reports_structured_errors(
    tmp_path: Path, lines: tuple[str, ...], detail: str
) -> None:
    path = _manifest(tmp_path / "broken", *lines)

    with pytest.raises(ConfigParseError) as excinfo:
        parse_manifest(path)

    assert excinfo.value.path == path.resolve()
    assert excinfo.value.code == "CONFIG_PARSE_ERROR"
    assert detail in str(excinfo.value)
