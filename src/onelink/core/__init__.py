"""
Core hardlinking engine: collector, checksum engine, merger and shared models.

This package contains the whole pipeline:
- InventoryCollectorImpl: sorted tree walk with dotfile/size filters and inode dedup
- ChecksumEngineImpl + HasherImpl: worker-pool content hashing into HashBuckets
- HardlinkMergerImpl: rename -> link -> remove replacement of duplicates
- Models: CandidateFile, TreeInfo, RunStats, MergeParams

No CLI dependencies, suitable for embedding.
"""

from .buckets import HashBuckets
from .errors import (
    OneLinkError, TraversalError, LeftoverTempFileError, HashInitError, MergeError)
from .models import (
    CandidateFile, TreeInfo, RunStats, MergeParams, HashAlgorithmName, Stage, TEMP_SUFFIX)
from .hasher import HasherImpl, SHA256AlgorithmImpl, XXH128AlgorithmImpl, get_algorithm
from .collector import InventoryCollectorImpl
from .checksum import ChecksumEngineImpl
from .merger import HardlinkMergerImpl

__all__ = [
    "HashBuckets",
    "OneLinkError",
    "TraversalError",
    "LeftoverTempFileError",
    "HashInitError",
    "MergeError",
    "CandidateFile",
    "TreeInfo",
    "RunStats",
    "MergeParams",
    "HashAlgorithmName",
    "Stage",
    "TEMP_SUFFIX",
    "HasherImpl",
    "SHA256AlgorithmImpl",
    "XXH128AlgorithmImpl",
    "get_algorithm",
    "InventoryCollectorImpl",
    "ChecksumEngineImpl",
    "HardlinkMergerImpl",
]
