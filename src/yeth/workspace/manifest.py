"""Manifest parsing for yeth.toml files."""

from __future__ import annotations

import tomllib
from pathlib import Path

from yeth.digest.matching import is_absolute_pattern
from yeth.errors import ConfigParseError, InvalidApplicationDirectoryError
from yeth.workspace.models import Application, classify_dependency

MANIFEST_FILE = "yeth.toml"


def parse_manifest(manifest_path: Path) -> Application:
    """Parse one manifest into an Application rooted at its directory."""
    path = manifest_path.resolve()
    directory = path.parent
    if not directory.is_dir():
        raise InvalidApplicationDirectoryError(path=directory)
    try:
        with path.open("rb") as handle:
            payload = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigParseError(path=path, detail=str(exc)) from exc
    except OSError as exc:
        raise ConfigParseError(path=path, detail=exc.strerror or str(exc)) from exc
    return application_from_payload(payload, path)


def application_from_payload(payload: dict[str, object], manifest_path: Path) -> Application:
    """Build an Application from an already-decoded manifest table."""
    directory = manifest_path.parent
    table = payload.get("app")
    if table is None:
        raise ConfigParseError(path=manifest_path, detail="missing [app] table")
    if not isinstance(table, dict):
        raise ConfigParseError(path=manifest_path, detail="'app' must be a table")

    name = directory.name
    if "name" in table:
        raw_name = table["name"]
        if not isinstance(raw_name, str) or not raw_name.strip():
            raise ConfigParseError(
                path=manifest_path, detail="'app.name' must be a non-empty string"
            )
        name = raw_name.strip()

    declared = _strings(table.get("dependencies", []), manifest_path, "dependencies")
    for item in declared:
        if not item.strip():
            raise ConfigParseError(
                path=manifest_path, detail="'app.dependencies' must not contain empty strings"
            )
    excludes = _strings(table.get("exclude", []), manifest_path, "exclude")
    for item in excludes:
        if is_absolute_pattern(item):
            raise ConfigParseError(
                path=manifest_path, detail=f"'app.exclude' entry '{item}' must be a relative path"
            )

    return Application(
        name=name,
        directory=directory,
        manifest_path=manifest_path,
        dependencies=tuple(classify_dependency(item.strip(), directory) for item in declared),
        exclude_patterns=excludes,
    )


def _strings(value: object, manifest_path: Path, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ConfigParseError(
            path=manifest_path, detail=f"'app.{field}' must be a list of strings"
        )
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ConfigParseError(
                path=manifest_path, detail=f"'app.{field}' must contain only strings"
            )
        output.append(item)
    return tuple(output)
