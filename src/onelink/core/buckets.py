"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/buckets.py
Thread-safe mapping from content digest to the paths that produced it.
"""

import threading
from typing import Dict, List, Tuple


class HashBuckets:
    """
    Digest -> ordered list of paths, guarded by a single lock.

    Writers append under the lock. Readers get copies taken under the same
    lock, so a half-appended bucket is never observed. The lock is exposed as
    `lock` so callers can update their own counters in the same critical
    section as the append.
    """

    def __init__(self):
        self.lock = threading.Lock()
        self._buckets: Dict[bytes, List[str]] = {}

    def append(self, digest: bytes, path: str) -> None:
        with self.lock:
            self.append_locked(digest, path)

    def append_locked(self, digest: bytes, path: str) -> None:
        """Append while the caller already holds `lock`."""
        self._buckets.setdefault(digest, []).append(path)

    def get(self, digest: bytes) -> List[str]:
        with self.lock:
            return list(self._buckets.get(digest, ()))

    def items(self) -> List[Tuple[bytes, List[str]]]:
        with self.lock:
            return [(digest, list(paths)) for digest, paths in self._buckets.items()]

    def path_count(self) -> int:
        with self.lock:
            return sum(len(paths) for paths in self._buckets.values())

    def __len__(self) -> int:
        with self.lock:
            return len(self._buckets)

    def __contains__(self, digest: bytes) -> bool:
        with self.lock:
            return digest in self._buckets

    def __repr__(self):
        return f"<HashBuckets buckets={len(self)}, paths={self.path_count()}>"
