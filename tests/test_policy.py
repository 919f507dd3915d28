"""Tests for the deny-list and safe-mode policy checks."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from folderrelocator.validation import (
    PolicyGuard,
    ProblemCategory,
    default_critical_paths,
    default_denied_paths,
)
from folderrelocator.validation.policy import is_same_or_inside

posix_only = pytest.mark.skipif(os.name == "nt", reason="POSIX system folders")


@pytest.fixture
def system_dir(tmp_path):
    """A stand-in for an operating-system folder."""
    return tmp_path / "Windows"


@pytest.fixture
def apps_dir(tmp_path):
    """A stand-in for Program Files."""
    return tmp_path / "Program Files"


class TestDenyList:
    """Tests for the fixed deny-list."""

    def test_exact_match_flagged(self, system_dir, apps_dir):
        """Test that a denied folder itself is always flagged."""
        guard = PolicyGuard(denied_paths=[system_dir], critical_paths=[apps_dir])

        problems = guard.check(str(system_dir), safe_mode=False)

        assert len(problems) == 1
        assert problems[0].category == ProblemCategory.POLICY
        assert problems[0].message == f'The "{system_dir}" directory cannot be moved.'

    def test_exact_match_flagged_in_exact_mode(self, system_dir):
        """Test exact matches with subpath matching turned off."""
        guard = PolicyGuard(denied_paths=[system_dir], critical_paths=[], match_subpaths=False)
        assert len(guard.check(str(system_dir), safe_mode=False)) == 1

    def test_subfolder_not_flagged_in_exact_mode(self, system_dir):
        """Test the exact-match limitation: nested folders slip through."""
        guard = PolicyGuard(denied_paths=[system_dir], critical_paths=[], match_subpaths=False)
        assert guard.check(str(system_dir / "System32" / "drivers"), safe_mode=False) == []

    def test_subfolder_flagged_by_default(self, system_dir):
        """Test that nested folders of a denied folder are rejected too."""
        guard = PolicyGuard(denied_paths=[system_dir], critical_paths=[])
        assert len(guard.check(str(system_dir / "System32" / "drivers"), safe_mode=False)) == 1

    def test_similar_name_not_flagged(self, system_dir):
        """Test that a sibling sharing a name prefix is not treated as nested."""
        guard = PolicyGuard(denied_paths=[system_dir], critical_paths=[])
        sibling = system_dir.parent / (system_dir.name + ".old")
        assert guard.check(str(sibling), safe_mode=False) == []

    def test_unrelated_folder_not_flagged(self, tmp_path, system_dir):
        """Test an ordinary folder."""
        guard = PolicyGuard(denied_paths=[system_dir], critical_paths=[])
        assert guard.check(str(tmp_path / "Games"), safe_mode=True) == []

    def test_unresolvable_source_skipped(self, system_dir):
        """Test that a source that cannot be resolved is left to the format check."""
        guard = PolicyGuard(denied_paths=[system_dir], critical_paths=[])
        with patch.object(Path, "resolve", side_effect=OSError("bad")):
            assert guard.check(str(system_dir), safe_mode=False) == []

    @posix_only
    def test_filesystem_root_only_matches_itself(self, tmp_path):
        """Test that denying / does not deny every folder on the volume."""
        guard = PolicyGuard(denied_paths=["/"], critical_paths=[])
        assert len(guard.check("/", safe_mode=False)) == 1
        assert guard.check(str(tmp_path), safe_mode=False) == []

    @posix_only
    def test_default_deny_list(self):
        """Test the built-in POSIX system folders."""
        assert "/etc" in default_denied_paths()
        guard = PolicyGuard(critical_paths=[])
        assert len(guard.check("/etc", safe_mode=False)) == 1
        assert len(guard.check("/usr/share", safe_mode=False)) == 1

    @pytest.mark.skipif(os.name != "nt", reason="Windows folders")
    def test_windows_case_insensitive(self):
        """Test that Windows paths are compared case-insensitively."""
        guard = PolicyGuard(denied_paths=[r"C:\Windows"], critical_paths=[])
        assert len(guard.check(r"c:\WINDOWS", safe_mode=False)) == 1


class TestSafeMode:
    """Tests for the advisory critical-folder check."""

    def test_flagged_in_safe_mode(self, apps_dir):
        """Test that Program Files is rejected in safe mode."""
        guard = PolicyGuard(denied_paths=[], critical_paths=[apps_dir])

        problems = guard.check(str(apps_dir), safe_mode=True)

        assert len(problems) == 1
        assert "safe mode" in problems[0].message

    @posix_only
    def test_default_critical_paths_reachable(self):
        """Test that no safe-mode folder is already covered by the deny-list."""
        guard = PolicyGuard()

        for path in default_critical_paths():
            assert guard.check(path, safe_mode=False) == []
            assert len(guard.check(path, safe_mode=True)) == 1
        assert "/usr/local" not in default_critical_paths()

    def test_allowed_without_safe_mode(self, apps_dir):
        """Test that turning safe mode off allows the move."""
        guard = PolicyGuard(denied_paths=[], critical_paths=[apps_dir])
        assert guard.check(str(apps_dir), safe_mode=False) == []

    def test_denied_and_critical_both_reported(self, apps_dir):
        """Test that both findings are collected."""
        guard = PolicyGuard(denied_paths=[apps_dir], critical_paths=[apps_dir])
        assert len(guard.check(str(apps_dir), safe_mode=True)) == 2


class TestIsSameOrInside:
    """Tests for the containment helper."""

    def test_same(self, tmp_path):
        """Test equal paths."""
        assert is_same_or_inside(str(tmp_path), str(tmp_path))

    def test_inside(self, tmp_path):
        """Test nested paths."""
        assert is_same_or_inside(str(tmp_path / "a"), str(tmp_path))
        assert not is_same_or_inside(str(tmp_path / "a"), str(tmp_path), match_subpaths=False)

    def test_outside(self, tmp_path):
        """Test a parent is not inside its child."""
        assert not is_same_or_inside(str(tmp_path), str(tmp_path / "a"))
