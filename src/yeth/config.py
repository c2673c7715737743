"""Engine configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from yeth.errors import EngineConfigError

WORKSPACE_CONFIG_FILE = "yeth-workspace.toml"
DEFAULT_SHORT_HASH_LENGTH = 10
MAX_WORKERS_CAP = 64
MAX_SHORT_HASH_LENGTH_CAP = 64


@dataclass(slots=True, frozen=True)
class EngineConfig:
    """Fully merged settings threaded through a hash run."""

    root: Path
    workers: int = 1
    short_hash_length: int = DEFAULT_SHORT_HASH_LENGTH
    run_log: Path | None = None

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot."""
        return {
            "root": str(self.root),
            "workers": self.workers,
            "short_hash_length": self.short_hash_length,
            "run_log": str(self.run_log) if self.run_log is not None else None,
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    workers: int | None = None
    short_hash_length: int | None = None
    run_log: Path | None = None


def default_config(root: Path) -> EngineConfig:
    """Build default config for a given workspace root."""
    return EngineConfig(root=root.resolve())


def load_workspace_config_file(root: Path) -> dict[str, object]:
    """Load optional yeth-workspace.toml from the workspace root."""
    config_path = root / WORKSPACE_CONFIG_FILE
    if not config_path.exists():
        return {}
    try:
        with config_path.open("rb") as handle:
            payload = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise EngineConfigError(detail=f"{WORKSPACE_CONFIG_FILE} is not valid TOML: {exc}") from exc
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise EngineConfigError(detail=f"Config section '{key}' must be a table.")
    return value


def merge_config(
    base: EngineConfig, payload: dict[str, object], overrides: CliOverrides
) -> EngineConfig:
    """Merge defaults, workspace config, then CLI overrides."""
    engine_payload = _get_table(payload, "engine")
    output_payload = _get_table(payload, "output")
    log_payload = _get_table(payload, "log")

    workers = _optional_positive_int_with_cap(
        engine_payload.get("workers"), "engine.workers", base.workers, MAX_WORKERS_CAP
    )
    short_hash_length = _optional_positive_int_with_cap(
        output_payload.get("short_hash_length"),
        "output.short_hash_length",
        base.short_hash_length,
        MAX_SHORT_HASH_LENGTH_CAP,
    )
    run_log = base.run_log
    if "run_log" in log_payload:
        raw_run_log = log_payload["run_log"]
        if not isinstance(raw_run_log, str) or not raw_run_log:
            raise EngineConfigError(detail="Config field 'log.run_log' must be a non-empty string.")
        run_log = (base.root / raw_run_log).resolve()

    merged = EngineConfig(
        root=base.root,
        workers=workers,
        short_hash_length=short_hash_length,
        run_log=run_log,
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: EngineConfig, overrides: CliOverrides) -> EngineConfig:
    """Apply startup overrides at highest precedence."""
    workers = _optional_positive_int_with_cap(
        overrides.workers, "overrides.workers", config.workers, MAX_WORKERS_CAP
    )
    short_hash_length = _optional_positive_int_with_cap(
        overrides.short_hash_length,
        "overrides.short_hash_length",
        config.short_hash_length,
        MAX_SHORT_HASH_LENGTH_CAP,
    )
    run_log = overrides.run_log.resolve() if overrides.run_log is not None else config.run_log
    return EngineConfig(
        root=config.root,
        workers=workers,
        short_hash_length=short_hash_length,
        run_log=run_log,
    )


def load_effective_config(root: Path, overrides: CliOverrides | None = None) -> EngineConfig:
    """Load effective config using merge order defaults -> workspace file -> overrides."""
    base = default_config(root)
    payload = load_workspace_config_file(base.root)
    return merge_config(base, payload, overrides or CliOverrides())


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise EngineConfigError(detail=f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise EngineConfigError(detail=f"Config field '{name}' must be <= {cap}.")
    return value
