"""Recursive, cancellable directory copy that never overwrites."""

import os
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..utils.logging import get_logger
from .cancel import CancelToken

logger = get_logger(__name__)


class CopyStatus(str, Enum):
    """How a tree copy ended."""

    SUCCESS = "success"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass
class CopyOutcome:
    """Result of copying one directory tree."""

    status: CopyStatus

    # Failure details, relative to the copy root
    failed_path: Path | None = None
    error: OSError | None = None

    files_copied: int = 0
    files_skipped: int = 0

    @property
    def success(self) -> bool:
        return self.status == CopyStatus.SUCCESS

    @property
    def cancelled(self) -> bool:
        return self.status == CopyStatus.CANCELLED

    @property
    def error_message(self) -> str | None:
        """Human readable failure description."""
        if self.status == CopyStatus.CANCELLED:
            return "Copy cancelled"
        if self.status == CopyStatus.FAILED:
            return f"Copy failed at {self.failed_path}: {self.error}"
        return None


class _Cancelled(Exception):
    pass


class _CopyFailed(Exception):
    def __init__(self, relative: Path, error: OSError):
        super().__init__(str(error))
        self.relative = relative
        self.error = error


def _copy_link(entry: os.DirEntry, target: Path) -> None:
    # Windows needs to know up front whether a link points at a directory
    os.symlink(os.readlink(entry.path), target, target_is_directory=entry.is_dir())


class CopyEngine:
    """
    Copies ``dir_from`` into ``dir_to``, creating directories as needed.

    Files whose name already exists at the destination are skipped, so an
    interrupted copy can be resumed by running it again. Symlinks are copied
    as links and never followed.

    The cancel token is checked once on entry and then before every file,
    never between directories or inside a single file's copy. Cancellation
    latency is therefore bounded by the file currently being copied plus,
    for directories holding no files, the walk down to the next file.
    Nothing is rolled back: files already copied stay at the destination.
    """

    def __init__(self, cancel_token: CancelToken | None = None):
        self.cancel_token = cancel_token or CancelToken()
        self.files_copied = 0
        self.files_skipped = 0

    def copy(self, dir_from: str | Path, dir_to: str | Path) -> CopyOutcome:
        """
        Copy a directory tree.

        Args:
            dir_from: Directory to copy
            dir_to: Directory to copy into (created if absent)

        Returns:
            CopyOutcome with SUCCESS, CANCELLED, or FAILED status
        """
        dir_from, dir_to = Path(dir_from), Path(dir_to)
        self.files_copied = 0
        self.files_skipped = 0
        logger.info(f"Copying {dir_from} -> {dir_to}")

        try:
            if self.cancel_token.is_cancelled():
                raise _Cancelled()
            self._copy_dir(dir_from, dir_to, Path())
        except _Cancelled:
            logger.warning(f"Copy of {dir_from} cancelled after {self.files_copied} file(s)")
            return self._outcome(CopyStatus.CANCELLED)
        except _CopyFailed as e:
            logger.error(f"Copy failed at {e.relative}: {e.error}")
            return self._outcome(CopyStatus.FAILED, e.relative, e.error)

        logger.info(f"Copied {self.files_copied} file(s), skipped {self.files_skipped} existing")
        return self._outcome(CopyStatus.SUCCESS)

    def _copy_dir(self, dir_from: Path, dir_to: Path, relative: Path) -> None:
        try:
            dir_to.mkdir(parents=True, exist_ok=True)
            with os.scandir(dir_from) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            raise _CopyFailed(relative, e) from e

        subdirs = []
        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                subdirs.append(entry)
                continue

            if self.cancel_token.is_cancelled():
                raise _Cancelled()

            target = dir_to / entry.name
            if os.path.lexists(target):
                self.files_skipped += 1
                continue
            try:
                if entry.is_symlink():
                    _copy_link(entry, target)
                else:
                    shutil.copy2(entry.path, target, follow_symlinks=False)
            except OSError as e:
                raise _CopyFailed(relative / entry.name, e) from e
            self.files_copied += 1
            logger.debug(f"Copied {relative / entry.name}")

        for entry in subdirs:
            self._copy_dir(Path(entry.path), dir_to / entry.name, relative / entry.name)

    def _outcome(
        self,
        status: CopyStatus,
        failed_path: Path | None = None,
        error: OSError | None = None,
    ) -> CopyOutcome:
        return CopyOutcome(
            status=status,
            failed_path=failed_path,
            error=error,
            files_copied=self.files_copied,
            files_skipped=self.files_skipped,
        )


def copy_directory(
    dir_from: str | Path,
    dir_to: str | Path,
    cancel_token: CancelToken | None = None,
) -> CopyOutcome:
    """Convenience wrapper around CopyEngine.copy."""
    return CopyEngine(cancel_token).copy(dir_from, dir_to)
