"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/checksum.py
Concurrent content hashing of the collected candidates.

SCHEDULING
----------
A fixed pool of worker threads shares one work queue. The producer feeds
candidate paths in traversal order and closes the queue by sending one
sentinel per worker; each worker exits when it receives its sentinel.
The queue holds a single item, so a put completes roughly when a worker
is free to take it. `checksum()` returns only after every worker has
been joined.

SHARED STATE
------------
Digests land in TreeInfo.buckets through TreeInfo.record_checksum, which
holds the bucket lock only for the append itself, never for file I/O.
Completion order across workers is not deterministic, so bucket order is
not either; the merger sorts each bucket before choosing a canonical file.

FAILURES
--------
- OSError while reading a file: logged, counted, file left out of all buckets
- Algorithm construction failure: HashInitError before any worker starts
- Any other exception in a worker: the remaining queue is drained without
  hashing and the exception is re-raised after the join
"""

import queue
import threading
import time
import logging
from typing import List, Optional

from onelink.core.hasher import HasherImpl, get_algorithm
from onelink.core.buckets import HashBuckets
from onelink.core.interfaces import Checksummer
from onelink.core.models import CandidateFile, HashAlgorithmName, Stage, TreeInfo

logger = logging.getLogger(__name__)

_CLOSED = object()


class ChecksumEngineImpl(Checksummer):
    """
    Hashes candidate files with a pool of worker threads.
    """

    def __init__(
        self,
        tree: Optional[TreeInfo] = None,
        algorithm: HashAlgorithmName = HashAlgorithmName.SHA256,
        hasher: Optional[HasherImpl] = None
    ):
        self.tree = tree if tree is not None else TreeInfo()
        self.algorithm = algorithm
        self._hasher = hasher
        self._errors: List[BaseException] = []
        self._aborted = threading.Event()

    def checksum(self, candidates: List[CandidateFile], workers: int) -> HashBuckets:
        """
        Hash every candidate using `workers` threads and return the buckets.

        Raises:
            HashInitError: The configured algorithm is unavailable.
            ValueError: `workers` is less than 1.
        """
        if workers < 1:
            raise ValueError("Worker count must be at least 1")

        hasher = self._hasher or HasherImpl(get_algorithm(self.algorithm))
        self._errors = []
        self._aborted.clear()

        work: "queue.Queue" = queue.Queue(maxsize=1)
        threads = [
            threading.Thread(
                target=self._worker,
                args=(hasher, work),
                name=f"checksum-{i}",
                daemon=True,
            )
            for i in range(workers)
        ]

        logger.debug(f"Starting {workers} checksum workers for {len(candidates)} files")
        start_time = time.time()
        self.tree.progress.start(Stage.CHECKSUM.value, len(candidates))

        try:
            for thread in threads:
                thread.start()
            for candidate in candidates:
                work.put(candidate.path)
            for _ in threads:
                work.put(_CLOSED)
            for thread in threads:
                thread.join()
        finally:
            self.tree.progress.finish()
        logger.debug(
            f"Checksummed {self.tree.checksummed_count} files "
            f"({self.tree.failed_count} unreadable) in {time.time() - start_time:.2f} seconds"
        )

        if self._errors:
            raise self._errors[0]
        return self.tree.buckets

    def _worker(self, hasher: HasherImpl, work: "queue.Queue") -> None:
        label = threading.current_thread().name
        logger.debug(f"[{label}] starting")
        while True:
            path = work.get()
            if path is _CLOSED:
                break
            if self._aborted.is_set():
                continue
            try:
                self._checksum_one(hasher, path, label)
            except Exception as e:
                logger.exception(f"[{label}] unexpected error while hashing {path}")
                self._errors.append(e)
                self._aborted.set()
            finally:
                self.tree.progress.advance(1)
        logger.debug(f"[{label}] exiting")

    def _checksum_one(self, hasher: HasherImpl, path: str, label: str) -> None:
        try:
            digest = hasher.compute_full_hash(path)
        except OSError as e:
            logger.warning(f"Skipping unreadable file {path}: {e}")
            self.tree.record_failure(path)
            return

        logger.debug(f"[{label}] {digest.hex()} {path}")
        self.tree.record_checksum(digest, path)
