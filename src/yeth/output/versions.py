"""Persist computed digests next to application manifests."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from yeth.engine import HashResult
from yeth.errors import ApplicationNotFoundError, DigestIOError
from yeth.workspace.models import Application

VERSION_FILE = "yeth.version"


def format_digest(digest: str, short_length: int | None = None) -> str:
    """Return the full digest or its leading short_length characters."""
    if short_length is None:
        return digest
    return digest[:short_length]


def write_versions(
    result: HashResult,
    apps: Mapping[str, Application],
    short_length: int | None = None,
) -> list[Path]:
    """Write one yeth.version file per hashed application and return their paths."""
    written: list[Path] = []
    for name, digest in result.items():
        app = apps.get(name)
        if app is None:
            raise ApplicationNotFoundError(name=name)
        target = app.directory / VERSION_FILE
        try:
            target.write_text(format_digest(digest, short_length), encoding="utf-8")
        except OSError as exc:
            raise DigestIOError(path=target, reason=exc.strerror or str(exc)) from exc
        written.append(target)
    return written
