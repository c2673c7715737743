"""Separator-agnostic path normalization and exclusion matching."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Final

HOUSEKEEPING_NAMES: Final[frozenset[str]] = frozenset(
    {".git", ".DS_Store", "yeth.version", "yeth-workspace.toml"}
)
WINDOWS_DRIVE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z]:/")


def normalize_path(text: str) -> str:
    """Normalize a path fragment to a posix form with lexical '..' folding.

    Backslashes become forward slashes, empty and '.' segments are dropped and
    'name/..' pairs collapse. Leading '..' segments that cannot be folded are
    kept, so paths reaching outside their anchor stay distinguishable.
    """
    normalized = text.replace("\\", "/")
    absolute = normalized.startswith("/")
    drive = ""
    if WINDOWS_DRIVE_PATTERN.match(normalized):
        drive, normalized = normalized[:2], normalized[2:]
        absolute = True
    parts: list[str] = []
    for part in normalized.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if parts and parts[-1] != "..":
                parts.pop()
                continue
            if absolute:
                continue
        parts.append(part)
    joined = "/".join(parts)
    if absolute:
        return f"{drive}/{joined}"
    return joined


def split_components(normalized: str) -> tuple[str, ...]:
    """Split a normalized path into its components."""
    if not normalized:
        return ()
    return tuple(part for part in normalized.split("/") if part)


def has_component_prefix(candidate: tuple[str, ...], prefix: tuple[str, ...]) -> bool:
    """Return True when prefix matches the leading components of candidate."""
    if not prefix or len(prefix) > len(candidate):
        return False
    return candidate[: len(prefix)] == prefix


def is_absolute_pattern(text: str) -> bool:
    """Return True for patterns rooted at a filesystem root or drive."""
    normalized = text.replace("\\", "/")
    return normalized.startswith("/") or WINDOWS_DRIVE_PATTERN.match(normalized) is not None


def is_excluded(
    candidate_relative_path: str,
    exclude_patterns: tuple[str, ...] | list[str],
    walked_relative_path: str | None = None,
) -> bool:
    """Return True when the candidate matches any exclusion pattern.

    The candidate is relative to the anchor that declared the patterns.
    Multi-component patterns match the candidate itself or anything beneath it.
    Single-component patterns additionally match the name wherever it appears
    below the walked directory: `walked_relative_path` when given, otherwise
    the candidate itself as long as it does not leave the anchor.
    """
    if not exclude_patterns:
        return False
    candidate = split_components(normalize_path(candidate_relative_path))
    if not candidate:
        return False
    if walked_relative_path is not None:
        walked = split_components(normalize_path(walked_relative_path))
    elif candidate[0] == "..":
        walked = ()
    else:
        walked = candidate
    for pattern in exclude_patterns:
        components = split_components(normalize_path(pattern))
        if not components:
            continue
        if has_component_prefix(candidate, components):
            return True
        if len(components) == 1 and components[0] != ".." and components[0] in walked:
            return True
    return False


def is_housekeeping(relative_path: str) -> bool:
    """Return True for entries that are never hashed regardless of configuration."""
    return any(
        part in HOUSEKEEPING_NAMES for part in split_components(normalize_path(relative_path))
    )


def relative_to_anchor(path: Path, anchor: Path) -> str:
    """Express path relative to anchor lexically, allowing '..' segments."""
    return normalize_path(os.path.relpath(os.path.abspath(path), os.path.abspath(anchor)))


@dataclass(slots=True, frozen=True)
class ExclusionRules:
    """Exclusion patterns bound to the directory they were declared against."""

    anchor: Path
    patterns: tuple[str, ...] = ()

    def excludes(self, path: Path, walked_relative_path: str | None = None) -> bool:
        """Return True when an absolute path is excluded for this anchor.

        `walked_relative_path` is the same entry relative to the directory
        being digested, which bounds where bare names may match.
        """
        if not self.patterns:
            return False
        return is_excluded(
            relative_to_anchor(path, self.anchor), self.patterns, walked_relative_path
        )
