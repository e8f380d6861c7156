"""
Shared fixtures for hardlinking tests.
Creates isolated temporary directory trees with controlled file contents.
"""
import logging
import os
import pytest
import tempfile
from pathlib import Path
from typing import Dict
import sys

# Add src/ to sys.path so the 'onelink' package is importable without installing
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))


@pytest.fixture(autouse=True)
def restore_root_logging():
    """The CLI reconfigures the root logger; undo that after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files:
    - a, b: identical content "X" (one duplicate pair)
    - c: unique content "Y"
    - sub/a_copy: third copy of "X" in a subdirectory
    - .hidden: another copy of "X" (excluded unless dotfiles are enabled)
    - empty: zero-byte file (excluded by the default minimum size of 1)
    """
    files = {}

    files["a"] = temp_dir / "a"
    files["a"].write_bytes(b"X" * 1024)
    files["b"] = temp_dir / "b"
    files["b"].write_bytes(b"X" * 1024)
    files["c"] = temp_dir / "c"
    files["c"].write_bytes(b"Y" * 1024)

    subdir = temp_dir / "sub"
    subdir.mkdir()
    files["sub_copy"] = subdir / "a_copy"
    files["sub_copy"].write_bytes(b"X" * 1024)

    files["hidden"] = temp_dir / ".hidden"
    files["hidden"].write_bytes(b"X" * 1024)

    files["empty"] = temp_dir / "empty"
    files["empty"].write_bytes(b"")

    return files


@pytest.fixture
def linked_files(temp_dir) -> Dict[str, Path]:
    """
    d and e are already hardlinked (same inode, content "Z"),
    f has the same content on a separate inode.
    """
    files = {}
    files["d"] = temp_dir / "d"
    files["d"].write_bytes(b"Z" * 512)
    files["e"] = temp_dir / "e"
    os.link(files["d"], files["e"])
    files["f"] = temp_dir / "f"
    files["f"].write_bytes(b"Z" * 512)
    return files


def snapshot_contents(root: Path) -> Dict[str, bytes]:
    """Map every regular file under root to its bytes."""
    return {
        str(p): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file() and not p.is_symlink()
    }
