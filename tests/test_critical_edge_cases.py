"""
Critical edge case tests for production safety.
Focuses on interrupted merges, files disappearing between stages and
partially completed runs.
"""
import os
import pytest
from unittest import mock
from onelink import HardlinkCommand, MergeParams
from onelink.core.errors import LeftoverTempFileError, MergeError
from onelink.core.models import TEMP_SUFFIX


class TestInterruptedMerge:
    """
    CRITICAL: a failure mid-merge must stop the run, keep the bytes reachable
    and make the next run refuse to start until an operator intervenes.
    """

    def test_failed_link_blocks_next_run(self, temp_dir):
        for name in ("a", "b"):
            (temp_dir / name).write_bytes(b"payload")
        params = MergeParams(root_dir=str(temp_dir), workers=2)

        with mock.patch("onelink.core.merger.os.link", side_effect=OSError("EXDEV")):
            with pytest.raises(MergeError):
                HardlinkCommand().execute(params)

        leftover = temp_dir / f"b{TEMP_SUFFIX}"
        assert leftover.read_bytes() == b"payload"

        with pytest.raises(LeftoverTempFileError) as exc_info:
            HardlinkCommand().execute(params)
        assert exc_info.value.path == str(leftover)

    def test_earlier_merges_survive_later_failure(self, temp_dir):
        """No rollback: buckets merged before the failure stay merged."""
        (temp_dir / "a1").write_bytes(b"first")
        (temp_dir / "a2").write_bytes(b"first")
        (temp_dir / "b1").write_bytes(b"second")
        (temp_dir / "b2").write_bytes(b"second")

        real_link = os.link
        calls = []

        def link_once(src, dst):
            calls.append((src, dst))
            if len(calls) > 1:
                raise OSError("disk on fire")
            real_link(src, dst)

        with mock.patch("onelink.core.merger.os.link", side_effect=link_once):
            with pytest.raises(MergeError):
                HardlinkCommand().execute(MergeParams(root_dir=str(temp_dir), workers=2))

        merged_src, merged_dst = calls[0]
        assert os.stat(merged_src).st_ino == os.stat(merged_dst).st_ino


class TestFilesChangingBetweenStages:

    def test_file_removed_after_collect_is_skipped(self, temp_dir):
        """A candidate that disappears before hashing is dropped, not fatal."""
        (temp_dir / "a").write_bytes(b"same")
        (temp_dir / "b").write_bytes(b"same")
        (temp_dir / "c").write_bytes(b"same")

        from onelink.core import collector as collector_module
        original_collect = collector_module.InventoryCollectorImpl.collect

        def collect_then_delete(self, root):
            result = original_collect(self, root)
            os.remove(os.path.join(root, "c"))
            return result

        with mock.patch.object(collector_module.InventoryCollectorImpl, "collect",
                               collect_then_delete):
            tree, _ = HardlinkCommand().execute(MergeParams(root_dir=str(temp_dir), workers=2))

        assert tree.failed_count == 1
        assert tree.dupe_count == 1
        assert os.stat(temp_dir / "a").st_ino == os.stat(temp_dir / "b").st_ino

    def test_canonical_removed_before_merge_is_fatal(self, temp_dir):
        (temp_dir / "a").write_bytes(b"same")
        (temp_dir / "b").write_bytes(b"same")

        from onelink.core import checksum as checksum_module
        original_checksum = checksum_module.ChecksumEngineImpl.checksum

        def checksum_then_delete(self, candidates, workers):
            buckets = original_checksum(self, candidates, workers)
            os.remove(temp_dir / "a")
            return buckets

        with mock.patch.object(checksum_module.ChecksumEngineImpl, "checksum",
                               checksum_then_delete):
            with pytest.raises(MergeError) as exc_info:
                HardlinkCommand().execute(MergeParams(root_dir=str(temp_dir), workers=2))

        assert exc_info.value.step == "stat"
        assert (temp_dir / "b").read_bytes() == b"same"
