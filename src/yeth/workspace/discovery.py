"""Deterministic manifest discovery across a monorepo tree."""

from __future__ import annotations

import os
from pathlib import Path

from yeth.digest.matching import HOUSEKEEPING_NAMES
from yeth.errors import DigestIOError, DuplicateApplicationError, InvalidApplicationDirectoryError
from yeth.workspace.manifest import MANIFEST_FILE, parse_manifest
from yeth.workspace.models import Application


def find_manifests(root: Path) -> list[Path]:
    """Return every manifest path under root in sorted traversal order."""
    resolved = root.resolve()
    if not resolved.is_dir():
        raise InvalidApplicationDirectoryError(path=resolved)
    manifests: list[Path] = []
    visited: set[tuple[int, int]] = set()
    stack: list[Path] = [resolved]
    while stack:
        current = stack.pop()
        try:
            stat = current.stat()
            identity = (stat.st_dev, stat.st_ino)
            if identity in visited:
                continue
            visited.add(identity)
            with os.scandir(current) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
        except OSError as exc:
            raise DigestIOError(path=current, reason=exc.strerror or str(exc)) from exc
        for entry in reversed(ordered_entries):
            if entry.name in HOUSEKEEPING_NAMES:
                continue
            full_path = Path(entry.path)
            if entry.is_dir():
                stack.append(full_path)
                continue
            if entry.name == MANIFEST_FILE and entry.is_file():
                manifests.append(full_path)
    manifests.sort(key=lambda item: item.as_posix())
    return manifests


def discover_applications(root: Path) -> dict[str, Application]:
    """Parse every manifest under root into applications keyed by unique name."""
    apps: dict[str, Application] = {}
    for manifest_path in find_manifests(root):
        app = parse_manifest(manifest_path)
        existing = apps.get(app.name)
        if existing is not None:
            raise DuplicateApplicationError(
                name=app.name,
                first=existing.manifest_path,
                second=app.manifest_path,
            )
        apps[app.name] = app
    return dict(sorted(apps.items()))
