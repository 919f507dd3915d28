"""Tests for source and destination presence checks."""

import os

import pytest

from folderrelocator.validation import ExistenceChecker, ProblemCategory
from folderrelocator.validation.existence import destination_parent


@pytest.fixture
def checker():
    """Create an ExistenceChecker."""
    return ExistenceChecker()


@pytest.fixture
def source(tmp_path):
    """An existing source folder."""
    folder = tmp_path / "source"
    folder.mkdir()
    return folder


class TestExistenceChecker:
    """Tests for ExistenceChecker."""

    def test_valid_request(self, checker, source, tmp_path):
        """Test that an existing source and free destination pass."""
        assert checker.check(str(source), str(tmp_path / "destination")) == []

    def test_missing_source(self, checker, tmp_path):
        """Test a source that does not exist."""
        problems = checker.check(str(tmp_path / "missing"), str(tmp_path / "destination"))

        assert [p.message for p in problems] == ["Source folder does not exist"]
        assert problems[0].category == ProblemCategory.PRECONDITION

    def test_source_is_a_file(self, checker, tmp_path):
        """Test that a file is not accepted as the source folder."""
        source = tmp_path / "file.txt"
        source.write_text("x")
        problems = checker.check(str(source), str(tmp_path / "destination"))
        assert [p.message for p in problems] == ["Source folder does not exist"]

    @pytest.mark.skipif(os.name == "nt", reason="needs unprivileged symlinks")
    def test_linked_source_refused(self, checker, source, tmp_path):
        """Test that a link to a folder is not accepted as the source."""
        link = tmp_path / "link"
        link.symlink_to(source, target_is_directory=True)

        problems = checker.check(str(link), str(tmp_path / "destination"))

        assert [p.message for p in problems] == ["Source folder is a symbolic link"]
        assert problems[0].category == ProblemCategory.PRECONDITION

    def test_existing_destination(self, checker, source, tmp_path):
        """Test that an existing destination is refused so trees are never merged."""
        destination = tmp_path / "destination"
        destination.mkdir()

        problems = checker.check(str(source), str(destination))

        assert [p.message for p in problems] == [
            "Destination folder already contains a folder with the same name"
        ]

    def test_missing_destination_parent(self, checker, source, tmp_path):
        """Test a destination whose parent does not exist."""
        problems = checker.check(str(source), str(tmp_path / "nowhere" / "destination"))
        assert [p.message for p in problems] == ["Destination folder does not exist"]

    def test_problems_accumulate(self, checker, tmp_path):
        """Test that every precondition problem is reported at once."""
        problems = checker.check(str(tmp_path / "missing"), str(tmp_path / "nowhere" / "destination"))
        assert len(problems) == 2

    def test_root_destination_captured(self, checker, source):
        """Test that a destination without a parent becomes a problem, not an exception."""
        root = os.path.abspath(os.sep)

        problems = checker.check(str(source), root)

        assert any(isinstance(p.cause, ValueError) for p in problems)


class TestDestinationParent:
    """Tests for destination_parent."""

    def test_parent(self, tmp_path):
        """Test an ordinary destination."""
        assert destination_parent(str(tmp_path / "dest")) == tmp_path

    def test_root_has_no_parent(self):
        """Test a filesystem root."""
        with pytest.raises(ValueError):
            destination_parent(os.path.abspath(os.sep))
