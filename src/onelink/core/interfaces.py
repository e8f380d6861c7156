"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the hardlinking pipeline.

Key Components:
---------------
- ProgressSink: Receives progress units from the long-running stages.
- HashAlgorithm: Incremental hash function (SHA-256, xxHash128).
- Collector: Walks a tree and returns the inode-unique candidate files.
- Checksummer: Hashes candidates concurrently into digest buckets.
- Merger: Replaces duplicates inside each bucket with hardlinks.
"""

from __future__ import annotations

from typing import Protocol, List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from onelink.core.buckets import HashBuckets
    from onelink.core.models import CandidateFile


# ===== Interfaces =====

class ProgressSink(Protocol):
    """
    Receives progress for one stage at a time.

    `advance` may be called from several checksum workers at once.
    """
    def start(self, stage: str, total: Optional[int] = None) -> None: ...
    def advance(self, n: int = 1) -> None: ...
    def finish(self) -> None: ...


class HashAlgorithm(Protocol):
    """
    Interface for incremental hash algorithms.

    Each call to `new` returns a fresh hash object exposing `update(data)`
    and `digest()`, as hashlib and xxhash objects do.
    """
    name: str

    def new(self): ...


class Collector(Protocol):
    """Interface for building the candidate list."""
    def collect(self, root: str) -> Tuple[List[CandidateFile], int]:
        """
        Walk `root` and return (candidates, total_seen).

        Raises:
            TraversalError: The walk could not continue.
        """
        ...


class Checksummer(Protocol):
    """Interface for the concurrent hashing stage."""
    def checksum(self, candidates: List[CandidateFile], workers: int) -> HashBuckets:
        """Hash every candidate and return the populated buckets."""
        ...


class Merger(Protocol):
    """Interface for the hardlink merge stage."""
    def merge(self, buckets: HashBuckets) -> Tuple[int, int]:
        """
        Collapse each multi-path bucket into hardlinks.

        Returns:
            (bytes_saved, duplicates_collapsed)

        Raises:
            MergeError: A stat, rename, link or remove failed.
        """
        ...
