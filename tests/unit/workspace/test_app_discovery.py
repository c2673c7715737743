from __future__ import annotations

from pathlib import Path

import pytest

from yeth.errors import DuplicateApplicationError, InvalidApplicationDirectoryError
from yeth.workspace.discovery import discover_applications, find_manifests


def _manifest(directory: Path, *lines: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "yeth.toml"
    path.write_text("\n".join(lines or ("[app]",)) + "\n", encoding="utf-8")
    return path


def test_discovery_collects_nested_manifests(tmp_path: Path) -> None:
    _manifest(tmp_path / "services" / "api", "[app]", 'dependencies = ["shared"]')
    _manifest(tmp_path / "libs" / "shared")
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "guide.md").write_text("# guide\n", encoding="utf-8")

    apps = discover_applications(tmp_path)

    assert list(apps) == ["api", "shared"]
    assert apps["api"].directory == (tmp_path / "services" / "api").resolve()


def test_discovery_skips_version_control_directories(tmp_path: Path) -> None:
    _manifest(tmp_path / "app")
    _manifest(tmp_path / ".git" / "modules" / "vendored")

    manifests = find_manifests(tmp_path)

    assert manifests == [(tmp_path / "app" / "yeth.toml").resolve()]


def test_discovery_rejects_duplicate_names(tmp_path: Path) -> None:
    first = _manifest(tmp_path / "a" / "api")
    second = _manifest(tmp_path / "b" / "api")

    with pytest.raises(DuplicateApplicationError) as excinfo:
        discover_applications(tmp_path)

    assert excinfo.value.name == "api"
    assert excinfo.value.first == first.resolve()
    assert excinfo.value.second == second.resolve()


def test_discovery_rejects_duplicate_explicit_names(tmp_path: Path) -> None:
    _manifest(tmp_path / "web", "[app]", 'name = "site"')
    _manifest(tmp_path / "site")

    with pytest.raises(DuplicateApplicationError, match="'site'"):
        discover_applications(tmp_path)


def test_discovery_of_empty_tree_returns_no_applications(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()

    assert discover_applications(tmp_path) == {}


def test_discovery_root_must_be_a_directory(tmp_path: Path) -> None:
    with pytest.raises(InvalidApplicationDirectoryError):
        discover_applications(tmp_path / "missing")
