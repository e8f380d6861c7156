"""
Unified command orchestrator for a hardlink run.
This is the single place that sequences collect -> checksum -> merge; the CLI
and any embedding code go through it.
"""
import logging
import time
from typing import List, Optional, Tuple

from onelink.core.checksum import ChecksumEngineImpl
from onelink.core.collector import InventoryCollectorImpl
from onelink.core.interfaces import ProgressSink
from onelink.core.merger import HardlinkMergerImpl
from onelink.core.models import CandidateFile, MergeParams, RunStats, Stage, TreeInfo
from onelink.services.progress import NullProgress
from onelink.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)


class HardlinkCommand:
    """
    Orchestrates the whole run:
    1. Collect inode-unique candidates under the root
    2. Checksum them with a worker pool
    3. Merge same-digest files into hardlinks

    Each stage finishes completely before the next one starts.

    Usage:
        params = MergeParams.from_human_readable(root_dir="/srv/mirror", dry_run=True)
        tree, stats = HardlinkCommand().execute(params)
        print(tree.bytes_saved, tree.dupe_count)
    """

    def __init__(self):
        self._candidates: List[CandidateFile] = []

    def execute(
            self,
            params: MergeParams,
            progress: Optional[ProgressSink] = None
    ) -> Tuple[TreeInfo, RunStats]:
        """
        Run all three stages with the given parameters.

        Returns:
            Tuple of (run state, statistics)

        Raises:
            TraversalError: The tree could not be fully walked, or an
                interrupted merge left a temporary file behind.
            HashInitError: The hash algorithm is unavailable.
            MergeError: A filesystem operation failed while merging.
        """
        tree = TreeInfo(progress=progress or NullProgress())
        stats = RunStats()
        total_start = time.time()

        if not params.algorithm.is_cryptographic:
            logger.warning(
                f"{params.algorithm.display_name} is not collision resistant; "
                f"a false match would discard a file's content"
            )

        # Step 1: inventory
        start = time.time()
        collector = InventoryCollectorImpl(
            exclude_dotfiles=params.exclude_dotfiles,
            min_size=params.min_size_bytes,
            tree=tree
        )
        self._candidates, total_seen = collector.collect(params.root_dir)
        duration = time.time() - start
        stats.update_stage(Stage.COLLECT.value, total_seen, duration)
        logger.info(
            f"Found {total_seen} files, {len(self._candidates)} to checksum "
            f"({duration:.2f}s)"
        )

        # Step 2: checksum
        start = time.time()
        engine = ChecksumEngineImpl(tree=tree, algorithm=params.algorithm)
        buckets = engine.checksum(self._candidates, params.workers)
        duration = time.time() - start
        queued_bytes = sum(c.size for c in self._candidates)
        stats.update_stage(Stage.CHECKSUM.value, tree.checksummed_count, duration, queued_bytes)
        logger.info(
            f"Checksummed {tree.checksummed_count} files into {len(buckets)} buckets "
            f"with {params.workers} workers ({duration:.2f}s, "
            f"{ConvertUtils.rate_to_human(tree.checksummed_count, duration)}, "
            f"{ConvertUtils.bytes_to_human(int(queued_bytes / duration) if duration > 0 else 0)}/s)"
        )
        if tree.failed_count:
            logger.warning(f"{tree.failed_count} files could not be read and were skipped")
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Buckets:\n{tree.format_buckets()}")

        # Step 3: merge
        start = time.time()
        merger = HardlinkMergerImpl(tree=tree, dry_run=params.dry_run)
        bytes_saved, duplicates = merger.merge(buckets)
        duration = time.time() - start
        stats.update_stage(Stage.MERGE.value, duplicates, duration, bytes_saved)
        verb = "Would free" if params.dry_run else "Freed"
        logger.info(
            f"{verb} {ConvertUtils.bytes_to_human(bytes_saved)} by merging "
            f"{duplicates} duplicates ({duration:.2f}s)"
        )

        stats.total_time = time.time() - total_start
        return tree, stats

    def get_candidates(self) -> List[CandidateFile]:
        """Get collected candidates after execution."""
        return self._candidates.copy()
