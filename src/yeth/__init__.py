"""Content-derived hashes for monorepo applications and their dependency closures."""

from .config import CliOverrides, EngineConfig, load_effective_config
from .engine import HashEngine, HashResult, compute_hashes
from .errors import YethError

__all__ = [
    "CliOverrides",
    "EngineConfig",
    "HashEngine",
    "HashResult",
    "YethError",
    "compute_hashes",
    "load_effective_config",
]
