"""Structured JSONL log of hash runs."""

from __future__ import annotations

import json
import uuid
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from pathlib import Path


@dataclass(slots=True, frozen=True)
class RunEvent:
    """Outcome of one engine operation."""

    timestamp: str
    run_id: str
    operation: str
    root: str
    ok: bool
    error_code: str | None
    app_count: int
    duration_ms: int
    metadata: dict[str, object] = field(default_factory=dict)


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_run_id() -> str:
    """Return a fresh identifier for one run."""
    return f"run-{uuid.uuid4().hex[:12]}"


class JsonlRunLogger:
    """Append-only JSONL log with one sorted-key object per engine run."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def append(self, event: RunEvent) -> None:
        """Record one run, creating the log directory on first use."""
        line = json.dumps(asdict(event), sort_keys=True) + "\n"
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(line)
