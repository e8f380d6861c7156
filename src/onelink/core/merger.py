"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/merger.py
Turns buckets of identical files into hardlinks of one canonical file.

Each duplicate is replaced in three steps:
    1. rename  path -> path + TEMP_SUFFIX
    2. link    canonical -> path
    3. remove  path + TEMP_SUFFIX
Until step 3 the duplicate's bytes stay reachable under the temporary
name. Any failure raises MergeError and stops the run; merges already
done are kept. A crash between steps 1 and 3 leaves the temporary file
behind, and the collector refuses to run over it next time.
"""

import os
import time
import logging
from typing import Dict, List, Optional, Tuple

from onelink.core.buckets import HashBuckets
from onelink.core.errors import MergeError
from onelink.core.interfaces import Merger
from onelink.core.models import Stage, TreeInfo, TEMP_SUFFIX
from onelink.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)


class HardlinkMergerImpl(Merger):
    """
    Single-threaded hardlink merge over a fully populated HashBuckets.

    The canonical file of a bucket is the path with the highest link count
    recorded at collection time, then the lexicographically smallest one.
    The outcome does not depend on checksum completion order.
    """

    def __init__(self, tree: Optional[TreeInfo] = None, dry_run: bool = False):
        self.tree = tree if tree is not None else TreeInfo()
        self.dry_run = dry_run

    def merge(self, buckets: HashBuckets) -> Tuple[int, int]:
        """
        Returns (bytes_saved, duplicates_collapsed) for this call.

        Raises:
            MergeError: A stat, rename, link or remove failed.
        """
        bytes_saved = 0
        duplicates = 0
        start_time = time.time()
        all_buckets = buckets.items()
        self.tree.progress.start(Stage.MERGE.value, len(all_buckets))

        try:
            for digest, paths in all_buckets:
                self.tree.progress.advance(1)
                if len(paths) <= 1:
                    continue
                saved, merged = self._merge_bucket(digest, paths)
                bytes_saved += saved
                duplicates += merged
        finally:
            self.tree.progress.finish()
        self.tree.bytes_saved += bytes_saved
        self.tree.dupe_count += duplicates

        logger.debug(
            f"Merged {duplicates} duplicates ({ConvertUtils.bytes_to_human(bytes_saved)}) "
            f"in {time.time() - start_time:.2f} seconds"
        )
        return bytes_saved, duplicates

    @staticmethod
    def choose_canonical(
        paths: List[str],
        link_counts: Optional[Dict[str, int]] = None
    ) -> Tuple[str, List[str]]:
        """
        Split a bucket into (canonical, others).

        The path with the most existing links wins, so paths that already
        share its inode end up linked with the rest of the bucket. Ties go to
        the lexicographically smallest path.
        """
        counts = link_counts or {}
        ordered = sorted(paths, key=lambda p: (-counts.get(p, 1), p))
        return ordered[0], ordered[1:]

    def _merge_bucket(self, digest: bytes, paths: List[str]) -> Tuple[int, int]:
        dest, others = self.choose_canonical(paths, self.tree.link_counts)
        try:
            size = os.stat(dest).st_size
        except OSError as e:
            raise MergeError("stat", others[0], dest, e) from e

        logger.debug(f"Bucket {digest.hex()}: keeping {dest}, {len(others)} duplicate(s)")

        saved = 0
        for name in others:
            if self.dry_run:
                logger.info(
                    f"Would dedupe {name} with {dest} ({ConvertUtils.bytes_to_human(size)})"
                )
            else:
                logger.debug(f"Deduping {name} to {dest}")
                self.replace_with_link(name, dest)
            saved += size
        return saved, len(others)

    @staticmethod
    def replace_with_link(name: str, dest: str) -> None:
        """Replace `name` with a hardlink to `dest` via rename, link, remove."""
        tmpname = f"{name}{TEMP_SUFFIX}"
        try:
            os.rename(name, tmpname)
        except OSError as e:
            raise MergeError("rename", name, dest, e) from e
        try:
            os.link(dest, name)
        except OSError as e:
            raise MergeError("link", name, dest, e) from e
        try:
            os.remove(tmpname)
        except OSError as e:
            raise MergeError("remove", name, dest, e) from e
