"""Structured logging utilities."""

from .runlog import JsonlRunLogger, RunEvent, new_run_id, utc_timestamp

__all__ = ["JsonlRunLogger", "RunEvent", "new_run_id", "utc_timestamp"]
