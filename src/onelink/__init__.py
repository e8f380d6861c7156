"""
onelink — replace duplicate files with hardlinks to reclaim disk space.

Core features:
- Inode-aware inventory: existing hardlinks are hashed once, not re-merged
- Parallel full-content hashing (SHA-256 by default, xxHash128 optional)
- Crash-safer merge: rename -> link -> remove, with leftovers detected on the next run
- Dry-run mode reporting the exact savings a real run would produce
"""

from importlib.metadata import PackageNotFoundError, version as _version

try:
    __version__ = _version("onelink")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Public API — only what users should import directly
from onelink.commands import HardlinkCommand
from onelink.core import (
    MergeParams, HashAlgorithmName, CandidateFile, TreeInfo, RunStats, HashBuckets,
    OneLinkError, TraversalError, LeftoverTempFileError, HashInitError, MergeError)
from onelink.utils.convert_utils import ConvertUtils

__all__ = [
    "HardlinkCommand",
    "MergeParams",
    "HashAlgorithmName",
    "CandidateFile",
    "TreeInfo",
    "RunStats",
    "HashBuckets",
    "OneLinkError",
    "TraversalError",
    "LeftoverTempFileError",
    "HashInitError",
    "MergeError",
    "ConvertUtils",
    "__version__",
]
