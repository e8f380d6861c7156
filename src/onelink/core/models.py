"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models shared by the collector, checksum engine and merger.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Set, Tuple, Union, Callable
import logging
import os
from enum import Enum

from onelink.core.buckets import HashBuckets
from onelink.core.interfaces import ProgressSink
from onelink.services.progress import NullProgress

logger = logging.getLogger(__name__)

# Appended to a duplicate while it is being replaced by a hardlink.
TEMP_SUFFIX = ".tmpdedupe"


# =============================
# Enums
# =============================

class HashAlgorithmName(Enum):
    """
    Content hash used as the equality proxy between files.
    """
    SHA256 = "sha256"
    XXH128 = "xxh128"

    @property
    def display_name(self) -> str:
        """Human-readable name for log output."""
        mapping = {
            HashAlgorithmName.SHA256: "SHA-256",
            HashAlgorithmName.XXH128: "xxHash128",
        }
        return mapping.get(self, self.value)

    @property
    def is_cryptographic(self) -> bool:
        return self is HashAlgorithmName.SHA256

    @property
    def description(self) -> str:
        """Detailed description for help text."""
        mapping = {
            HashAlgorithmName.SHA256:
                "256-bit cryptographic digest (default, collision resistant)",
            HashAlgorithmName.XXH128:
                "128-bit non-cryptographic digest (faster, trusted inputs only)",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class Stage(str, Enum):
    COLLECT = "Finding files"
    CHECKSUM = "Checksum"
    MERGE = "Cmp/Link"


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class CandidateFile:
    """
    A regular file selected for hashing.
    Discovered once per unique (device, inode) identity.
    """
    path: str
    size: int  # in bytes
    device: int
    inode: int
    nlink: int = 1

    @property
    def identity(self) -> Tuple[int, int]:
        """On-disk identity; hardlinks of one file share it."""
        return self.device, self.inode

    def __repr__(self):
        return f"<CandidateFile path={self.path}, size={self.size}, inode={self.inode}>"


@dataclass
class TreeInfo:
    """
    Run-scoped state shared by all pipeline stages.

    The collector fills `inodes`, `link_counts` and `file_count`. Checksum
    workers append to `buckets` and bump the checksum counters through
    `record_checksum` and `record_failure`, both of which hold the bucket
    lock. The merger owns the whole object once every worker has been joined.
    """
    inodes: Set[Tuple[int, int]] = field(default_factory=set)
    link_counts: Dict[str, int] = field(default_factory=dict)
    buckets: HashBuckets = field(default_factory=HashBuckets)
    file_count: int = 0
    queued_count: int = 0
    checksummed_count: int = 0
    failed_count: int = 0
    dupe_count: int = 0
    bytes_saved: int = 0
    progress: ProgressSink = field(default_factory=NullProgress)

    def record_checksum(self, digest: bytes, path: str) -> None:
        with self.buckets.lock:
            self.buckets.append_locked(digest, path)
            self.checksummed_count += 1

    def record_failure(self, path: str) -> None:
        with self.buckets.lock:
            self.failed_count += 1

    def format_buckets(self) -> str:
        """One `hexdigest: path path ...` line per bucket."""
        return "\n".join(
            f"{digest.hex()}: {' '.join(paths)}"
            for digest, paths in self.buckets.items()
        )

    def __str__(self) -> str:
        return self.format_buckets()


@dataclass
class RunStats:
    """
    Statistics collected while the pipeline runs.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}
        self._listeners: List[Callable[[str, Dict], None]] = []

    def add_listener(self, listener: Callable[[str, Dict], None]):
        """Adds a listener to receive updates when stats are updated."""
        self._listeners.append(listener)

    def update_stage(
            self,
            stage_name: str,
            items: int,
            duration: float,
            bytes_processed: int = 0
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "items": 0,
                "bytes": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["items"] += items
        self.stage_stats[stage_name]["bytes"] += bytes_processed
        self.stage_stats[stage_name]["time"] += duration

        for listener in self._listeners:
            try:
                listener(stage_name, self.stage_stats[stage_name])
            except Exception as e:
                logger.warning(f"Error in stats event handler: {e}")

    def throughput(self, stage_name: str) -> float:
        """Items per second for a finished stage, 0.0 if unknown."""
        data = self.stage_stats.get(stage_name)
        if not data or data["time"] <= 0:
            return 0.0
        return data["items"] / data["time"]

    def print_summary(self) -> str:
        lines = [
            "Run Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s",
            "Stage: ITEMS / TIME / RATE"
        ]
        for stage, data in self.stage_stats.items():
            lines.append(
                f"{stage}: {data['items']} / {data['time']:.3f}s / "
                f"{self.throughput(stage):.1f} per s"
            )
        return "\n".join(lines)


"""
DTO for run parameters with built-in validation.
"""
from onelink.utils.convert_utils import ConvertUtils

LOG_LEVELS = ("debug", "info", "warn", "warning", "error")


def default_worker_count() -> int:
    return os.cpu_count() or 1


@dataclass
class MergeParams:
    """Parameters for a hardlink run with validation."""
    root_dir: str = "."
    dry_run: bool = False
    workers: int = field(default_factory=default_worker_count)
    exclude_dotfiles: bool = True
    min_size_bytes: int = 1
    algorithm: HashAlgorithmName = HashAlgorithmName.SHA256
    log_level: str = "warning"

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ValueError("Root directory cannot be empty")

        if self.min_size_bytes < 0:
            raise ValueError("Minimum size cannot be negative")

        if self.workers < 1:
            raise ValueError("Worker count must be at least 1")

        self.log_level = self.log_level.strip().lower()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: '{self.log_level}'")

    @staticmethod
    def from_human_readable(
            root_dir: str = ".",
            min_size_str: str = "1",
            dry_run: bool = False,
            workers: Optional[int] = None,
            exclude_dotfiles: bool = True,
            algorithm: HashAlgorithmName = HashAlgorithmName.SHA256,
            log_level: str = "warning",
    ) -> 'MergeParams':
        """
        Factory method to create params from human-readable inputs.
        Used by the CLI to turn "4K"-style sizes into bytes.
        """
        return MergeParams(
            root_dir=root_dir,
            dry_run=dry_run,
            workers=workers if workers is not None else default_worker_count(),
            exclude_dotfiles=exclude_dotfiles,
            min_size_bytes=ConvertUtils.human_to_bytes(min_size_str),
            algorithm=algorithm,
            log_level=log_level,
        )
