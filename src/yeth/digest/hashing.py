"""Deterministic content digests for files, directory trees and dependency folds."""

from __future__ import annotations

import hashlib
import os
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from yeth.digest.matching import HOUSEKEEPING_NAMES, ExclusionRules
from yeth.errors import DigestIOError, NotFileOrDirectoryError

_READ_CHUNK_BYTES = 1024 * 128


@dataclass(slots=True, frozen=True)
class DigestFile:
    """One file selected for a directory digest."""

    relative_path: str
    full_path: Path


def digest_file(path: Path) -> str:
    """Compute SHA-256 over file bytes only, in deterministic chunked reads."""
    digest = hashlib.sha256()
    try:
        with path.open("rb") as handle:
            while True:
                chunk = handle.read(_READ_CHUNK_BYTES)
                if not chunk:
                    break
                digest.update(chunk)
    except OSError as exc:
        raise DigestIOError(path=path, reason=exc.strerror or str(exc)) from exc
    return digest.hexdigest()


def list_digest_files(root: Path, rules: ExclusionRules | None = None) -> list[DigestFile]:
    """Return files under root that take part in its digest, in fold order."""
    files: list[DigestFile] = []
    visited: set[tuple[int, int]] = set()
    stack: list[tuple[Path, str]] = [(root, "")]
    while stack:
        current, prefix = stack.pop()
        try:
            # A directory reachable through several paths (symlink aliases or loops)
            # is digested once, under the first path popped from the stack.
            identity = _directory_identity(current)
            if identity in visited:
                continue
            visited.add(identity)
            with os.scandir(current) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
        except OSError as exc:
            raise DigestIOError(path=current, reason=exc.strerror or str(exc)) from exc
        for entry in ordered_entries:
            if entry.name in HOUSEKEEPING_NAMES:
                continue
            full_path = Path(entry.path)
            relative = f"{prefix}{entry.name}"
            if rules is not None and rules.excludes(full_path, relative):
                continue
            try:
                if entry.is_dir():
                    stack.append((full_path, f"{relative}/"))
                    continue
                if not entry.is_file():
                    continue
            except OSError as exc:
                raise DigestIOError(path=full_path, reason=exc.strerror or str(exc)) from exc
            files.append(DigestFile(relative_path=relative, full_path=full_path))
    files.sort(key=lambda item: _sort_key(item.relative_path))
    return files


def digest_directory(root: Path, rules: ExclusionRules | None = None, workers: int = 1) -> str:
    """Compute an order-sensitive digest of every non-excluded file under root.

    Each file contributes its root-relative posix path and its content digest,
    so renames and moves change the result even when bytes are identical. An
    empty selection yields the digest of empty input.
    """
    files = list_digest_files(root, rules)
    if workers > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            file_digests = list(pool.map(digest_file, [item.full_path for item in files]))
    else:
        file_digests = [digest_file(item.full_path) for item in files]
    digest = hashlib.sha256()
    for item, file_digest in zip(files, file_digests, strict=True):
        digest.update(item.relative_path.encode("utf-8", "surrogateescape"))
        digest.update(b"\x00")
        digest.update(file_digest.encode("ascii"))
        digest.update(b"\n")
    return digest.hexdigest()


def digest_path(path: Path, rules: ExclusionRules | None = None, workers: int = 1) -> str:
    """Digest a file or a directory depending on what exists at path."""
    if path.is_file():
        return digest_file(path)
    if path.is_dir():
        return digest_directory(path, rules, workers=workers)
    raise NotFileOrDirectoryError(path=path)


def fold_digests(own: str, dependency_digests: Iterable[str]) -> str:
    """Fold an application's own digest with its dependency digests in order."""
    digest = hashlib.sha256()
    digest.update(own.encode("ascii"))
    for dependency_digest in dependency_digests:
        digest.update(dependency_digest.encode("ascii"))
    return digest.hexdigest()


def _sort_key(relative_path: str) -> bytes:
    return relative_path.encode("utf-8", "surrogateescape")


def _directory_identity(path: Path) -> tuple[int, int]:
    stat = path.stat()
    return (stat.st_dev, stat.st_ino)
