"""Exclusion matching and content digests."""

from .hashing import (
    DigestFile,
    digest_directory,
    digest_file,
    digest_path,
    fold_digests,
    list_digest_files,
)
from .matching import (
    HOUSEKEEPING_NAMES,
    ExclusionRules,
    is_excluded,
    is_housekeeping,
    normalize_path,
)

__all__ = [
    "DigestFile",
    "ExclusionRules",
    "HOUSEKEEPING_NAMES",
    "digest_directory",
    "digest_file",
    "digest_path",
    "fold_digests",
    "is_excluded",
    "is_housekeeping",
    "list_digest_files",
    "normalize_path",
]
