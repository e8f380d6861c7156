"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/collector.py
Builds the inventory of files to hash.
Features:
- Walks the tree in sorted order so candidate order is reproducible
- Refuses to run over leftovers of an interrupted merge, dotfiles included
- Skips non-regular files and, optionally, dotfiles
- Queues each (device, inode) identity once, so existing hardlinks are not rehashed
"""

import os
import stat
import time
import logging
from typing import List, Optional, Tuple

from onelink.core.errors import LeftoverTempFileError, TraversalError
from onelink.core.interfaces import Collector
from onelink.core.models import CandidateFile, Stage, TreeInfo, TEMP_SUFFIX

logger = logging.getLogger(__name__)


class InventoryCollectorImpl(Collector):
    """
    Walks a directory tree and returns inode-unique candidate files.

    Any error that prevents a complete walk raises TraversalError: a partial
    inventory could leave duplicates unmerged without the operator noticing.

    Attributes:
        exclude_dotfiles: Skip files whose base name starts with '.'
        min_size: Files smaller than this many bytes are not queued
        tree: Run state receiving the inode set and file counters
    """

    def __init__(
        self,
        exclude_dotfiles: bool = True,
        min_size: int = 1,
        tree: Optional[TreeInfo] = None
    ):
        self.exclude_dotfiles = exclude_dotfiles
        self.min_size = min_size
        self.tree = tree if tree is not None else TreeInfo()

    def collect(self, root: str) -> Tuple[List[CandidateFile], int]:
        """
        Returns (candidates, total_seen) where total_seen counts every regular
        file that passed the type and dotfile filters.
        """
        logger.debug(f"Collecting files under: {root}")
        logger.debug(f"Filters: exclude_dotfiles={self.exclude_dotfiles}, min_size={self.min_size}")

        if not os.path.exists(root):
            raise TraversalError(f"Directory does not exist: {root}", path=root)
        if not os.path.isdir(root):
            raise TraversalError(f"Not a directory: {root}", path=root)

        candidates: List[CandidateFile] = []
        start_time = time.time()
        self.tree.progress.start(Stage.COLLECT.value)

        try:
            for dirpath, dirnames, filenames in os.walk(root, onerror=self._raise_walk_error):
                dirnames.sort()
                for filename in sorted(filenames):
                    candidate = self._process_entry(os.path.join(dirpath, filename))
                    if candidate is not None:
                        candidates.append(candidate)
                    self.tree.progress.advance(1)
        finally:
            self.tree.progress.finish()
        self.tree.queued_count = len(candidates)

        logger.debug(f"Total collect time: {time.time() - start_time:.2f} seconds")
        logger.debug(f"Found {self.tree.file_count} files, {len(candidates)} to checksum")
        return candidates, self.tree.file_count

    @staticmethod
    def _raise_walk_error(error: OSError) -> None:
        raise TraversalError(f"Cannot read directory: {error}", path=error.filename) from error

    def _process_entry(self, path: str) -> Optional[CandidateFile]:
        """
        Apply the per-entry policy to a single directory entry.
        Returns a CandidateFile if it should be hashed, else None.
        """
        try:
            st = os.lstat(path)
        except OSError as e:
            raise TraversalError(f"Cannot stat '{path}': {e}", path=path) from e

        if not stat.S_ISREG(st.st_mode):
            logger.debug(f"Skipping non-regular file: {path}")
            return None

        # Leftovers are fatal even when hidden
        if path.endswith(TEMP_SUFFIX):
            raise LeftoverTempFileError(path)

        if self.exclude_dotfiles and os.path.basename(path).startswith("."):
            logger.debug(f"Skipping dotfile: {path}")
            return None

        self.tree.file_count += 1

        if st.st_size < 0:
            raise TraversalError(f"Invalid size {st.st_size} for '{path}'", path=path)

        if st.st_size < self.min_size:
            logger.debug(f"Skipping {path} (size {st.st_size} bytes below minimum)")
            return None

        if not st.st_ino:
            raise TraversalError(f"Somehow got a file without inode number: '{path}'", path=path)

        identity = (st.st_dev, st.st_ino)
        if identity in self.tree.inodes:
            logger.debug(f"Already seen i-node {st.st_ino}: {path}")
            return None
        self.tree.inodes.add(identity)
        self.tree.link_counts[path] = st.st_nlink

        return CandidateFile(
            path=path, size=st.st_size, device=st.st_dev, inode=st.st_ino, nlink=st.st_nlink
        )
