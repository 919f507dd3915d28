"""Tests for the deep permission scan."""

import os
import threading
from unittest.mock import patch

import pytest

from folderrelocator.validation import DeepPermissionScanner, ProblemCategory, open_exclusively

posix_only = pytest.mark.skipif(os.name == "nt", reason="uses flock")


@pytest.fixture
def tree(tmp_path):
    """Source tree three levels deep."""
    root = tmp_path / "source"
    (root / "a" / "b" / "c").mkdir(parents=True)
    (root / "top.txt").write_text("top")
    (root / "a" / "one.txt").write_text("one")
    (root / "a" / "b" / "two.txt").write_text("two")
    (root / "a" / "b" / "c" / "three.txt").write_text("three")
    return root


class TestOpenExclusively:
    """Tests for open_exclusively."""

    def test_does_not_modify_file(self, tmp_path):
        """Test that the probe leaves contents and size alone."""
        target = tmp_path / "data.bin"
        target.write_bytes(b"\x00\x01\x02")

        open_exclusively(target)

        assert target.read_bytes() == b"\x00\x01\x02"

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises OSError."""
        with pytest.raises(OSError):
            open_exclusively(tmp_path / "missing")

    @posix_only
    def test_locked_file(self, tmp_path):
        """Test that a file locked elsewhere cannot be opened exclusively."""
        import fcntl

        target = tmp_path / "locked.db"
        target.write_text("busy")
        with open(target, "r+") as held:
            fcntl.flock(held.fileno(), fcntl.LOCK_EX)
            with pytest.raises(OSError):
                open_exclusively(target)


class TestDeepPermissionScanner:
    """Tests for DeepPermissionScanner."""

    def test_clean_tree(self, tree):
        """Test that a tree of free files passes."""
        assert DeepPermissionScanner(max_workers=2).check(str(tree)) == []

    def test_default_workers(self):
        """Test that the pool defaults to the CPU count."""
        assert DeepPermissionScanner().max_workers == (os.cpu_count() or 1)

    @posix_only
    def test_deeply_nested_lock_found(self, tree):
        """Test that files below the first level are scanned too."""
        import fcntl

        locked = tree / "a" / "b" / "c" / "three.txt"
        with open(locked, "r+") as held:
            fcntl.flock(held.fileno(), fcntl.LOCK_EX)
            problems = DeepPermissionScanner(max_workers=4).check(str(tree))

        assert len(problems) == 1
        assert problems[0].category == ProblemCategory.PERMISSION
        assert str(locked) in problems[0].message

    def test_every_file_probed_once(self, tree):
        """Test that each file in the tree is probed exactly once."""
        seen = []
        lock = threading.Lock()

        def record(path):
            with lock:
                seen.append(os.path.relpath(path, tree))

        with patch("folderrelocator.validation.deep_scan.open_exclusively", side_effect=record):
            DeepPermissionScanner(max_workers=3).check(str(tree))

        assert sorted(seen) == sorted(
            [
                "top.txt",
                os.path.join("a", "one.txt"),
                os.path.join("a", "b", "two.txt"),
                os.path.join("a", "b", "c", "three.txt"),
            ]
        )

    def test_concurrent_failures_all_collected(self, tmp_path):
        """Test that no finding is lost when many workers fail at once."""
        root = tmp_path / "many"
        for d in range(10):
            folder = root / f"dir{d}"
            folder.mkdir(parents=True)
            for f in range(20):
                (folder / f"file{f}.txt").write_text("x")

        def fail_odd(path):
            if int(os.path.basename(path)[4:-4]) % 2:
                raise PermissionError(f"in use: {path}")

        with patch("folderrelocator.validation.deep_scan.open_exclusively", side_effect=fail_odd):
            problems = DeepPermissionScanner(max_workers=8).check(str(root))

        assert len(problems) == 100
        assert all(isinstance(p.cause, PermissionError) for p in problems)

    def test_unlistable_directory_reported(self, tree):
        """Test that walk errors become problems."""
        error = PermissionError(13, "Permission denied", str(tree / "a"))

        def fake_walk(top, onerror=None):
            onerror(error)
            return iter(())

        with patch("folderrelocator.validation.deep_scan.os.walk", side_effect=fake_walk):
            problems = DeepPermissionScanner().check(str(tree))

        assert len(problems) == 1
        assert problems[0].cause is error
        assert str(tree / "a") in problems[0].message

    @posix_only
    def test_symlinks_not_probed(self, tree, tmp_path):
        """Test that links inside the tree are not followed to their targets."""
        outside = tmp_path / "outside.txt"
        outside.write_text("not moved")
        (tree / "link.txt").symlink_to(outside)

        with patch("folderrelocator.validation.deep_scan.open_exclusively") as probe:
            DeepPermissionScanner().check(str(tree))

        probed = {os.path.basename(call.args[0]) for call in probe.call_args_list}
        assert "link.txt" not in probed
