"""Move orchestrator: copy a directory tree, then remove the original."""

import os
import shutil
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..utils.logging import get_logger
from .cancel import CancelToken
from .copier import CopyEngine, CopyOutcome

logger = get_logger(__name__)


class MoveStatus(str, Enum):
    """How a directory move ended."""

    MOVED = "moved"
    CANCELLED = "cancelled"
    COPY_FAILED = "copy_failed"
    VERIFY_FAILED = "verify_failed"
    DELETE_FAILED = "delete_failed"


@dataclass
class MoveResult:
    """Result of a directory move operation."""

    source_path: Path
    destination_path: Path
    status: MoveStatus

    copy_outcome: CopyOutcome | None = None
    error_message: str | None = None

    @property
    def success(self) -> bool:
        """The tree is at the destination and the source is gone."""
        return self.status == MoveStatus.MOVED

    @property
    def cancelled(self) -> bool:
        return self.status == MoveStatus.CANCELLED

    @property
    def source_intact(self) -> bool:
        """The original tree was not touched."""
        return self.status in (
            MoveStatus.CANCELLED,
            MoveStatus.COPY_FAILED,
            MoveStatus.VERIFY_FAILED,
        )


def find_size_mismatches(source: Path, destination: Path) -> list[Path]:
    """Relative paths of source files missing from, or sized differently in, the copy."""
    mismatches: list[Path] = []
    for dirpath, _dirnames, filenames in os.walk(source):
        for name in filenames:
            src_file = Path(dirpath) / name
            relative = src_file.relative_to(source)
            dst_file = destination / relative
            try:
                if os.lstat(dst_file).st_size != os.lstat(src_file).st_size:
                    mismatches.append(relative)
            except OSError:
                mismatches.append(relative)
    return mismatches


class MoveOrchestrator:
    """
    Moves a directory tree by copying it and then deleting the original.

    The source is only deleted after the whole copy succeeded. A cancelled or
    failed copy leaves the source untouched and whatever was copied so far at
    the destination.

    Creating the directory link at the vacated source path is left to the
    caller once the result reports success.
    """

    def __init__(self, verify_sizes: bool = False):
        """
        Initialize the orchestrator.

        Args:
            verify_sizes: Compare every file's size in the copy before deleting
                the source
        """
        self.verify_sizes = verify_sizes
        self._executor: ThreadPoolExecutor | None = None

    def move(
        self,
        source: str | Path,
        destination: str | Path,
        cancel_token: CancelToken | None = None,
    ) -> MoveResult:
        """
        Move a directory tree, blocking until done.

        Args:
            source: Directory to move
            destination: New location; must not exist yet
            cancel_token: Checked before every file copy

        Returns:
            MoveResult with operation status
        """
        source, destination = Path(source), Path(destination)

        outcome = CopyEngine(cancel_token).copy(source, destination)
        if outcome.cancelled:
            return MoveResult(
                source_path=source,
                destination_path=destination,
                status=MoveStatus.CANCELLED,
                copy_outcome=outcome,
                error_message=outcome.error_message,
            )
        if not outcome.success:
            return MoveResult(
                source_path=source,
                destination_path=destination,
                status=MoveStatus.COPY_FAILED,
                copy_outcome=outcome,
                error_message=outcome.error_message,
            )

        if self.verify_sizes:
            mismatches = find_size_mismatches(source, destination)
            if mismatches:
                logger.error(f"Copy of {source} differs from the original in {len(mismatches)} file(s)")
                return MoveResult(
                    source_path=source,
                    destination_path=destination,
                    status=MoveStatus.VERIFY_FAILED,
                    copy_outcome=outcome,
                    error_message=f"Copied file does not match the original: {mismatches[0]}",
                )

        try:
            shutil.rmtree(source)
        except OSError as e:
            logger.error(f"Copied {source} but could not delete it: {e}")
            return MoveResult(
                source_path=source,
                destination_path=destination,
                status=MoveStatus.DELETE_FAILED,
                copy_outcome=outcome,
                error_message=f"Could not delete {getattr(e, 'filename', None) or source}: {e}",
            )

        logger.info(f"Moved: {source} -> {destination}")
        return MoveResult(
            source_path=source,
            destination_path=destination,
            status=MoveStatus.MOVED,
            copy_outcome=outcome,
        )

    def submit(
        self,
        source: str | Path,
        destination: str | Path,
        cancel_token: CancelToken | None = None,
    ) -> "Future[MoveResult]":
        """
        Run ``move`` on a background thread.

        Moves submitted to the same orchestrator run one after another.
        """
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="mover")
        return self._executor.submit(self.move, source, destination, cancel_token)

    def shutdown(self, wait: bool = True):
        """Stop the background thread."""
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.shutdown()
