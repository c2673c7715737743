from __future__ import annotations

import json
from pathlib import Path

from yeth.logging import JsonlRunLogger, RunEvent, new_run_id, utc_timestamp


def _event(timestamp: str, operation: str = "compute_all") -> RunEvent:
    return RunEvent(
        timestamp=timestamp,
        run_id="run-000000000001",
        operation=operation,
        root="/repo",
        ok=True,
        error_code=None,
        app_count=3,
        duration_ms=12,
        metadata={"app": "api"},
    )


def test_run_log_lines_are_sorted_json_objects(tmp_path: Path) -> None:
    logger = JsonlRunLogger(tmp_path / "nested" / "runs.jsonl")

    logger.append(_event("2026-01-01T00:00:00.000Z"))

    line = logger.path.read_text(encoding="utf-8").splitlines()[0]
    record = json.loads(line)
    assert list(record) == sorted(record)
    assert record["operation"] == "compute_all"
    assert record["metadata"] == {"app": "api"}


def test_run_log_appends_in_order_and_creates_directory_lazily(tmp_path: Path) -> None:
    logger = JsonlRunLogger(tmp_path / "logs" / "runs.jsonl")
    assert not (tmp_path / "logs").exists()

    for index in range(3):
        logger.append(_event(f"2026-01-0{index + 1}T00:00:00.000Z", operation=f"op{index}"))

    lines = logger.path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["operation"] for line in lines] == ["op0", "op1", "op2"]


def test_timestamps_and_run_ids_have_stable_shapes() -> None:
    timestamp = utc_timestamp()
    run_id = new_run_id()

    assert timestamp.endswith("Z")
    assert len(timestamp) == len("2026-01-01T00:00:00.000Z")
    assert run_id.startswith("run-")
    assert len(run_id) == len("run-") + 12
