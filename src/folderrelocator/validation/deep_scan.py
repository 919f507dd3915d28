"""Exhaustive per-file lock check across the source tree."""

import os
import sys
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from ..utils.logging import get_logger
from .report import Problem, ProblemCategory

if sys.platform == "win32":
    import msvcrt
else:
    import fcntl

logger = get_logger(__name__)


def open_exclusively(path: str | Path) -> None:
    """
    Open a file for read-write and take a non-blocking exclusive lock on it.

    The file is closed again straight away and its contents are never
    changed. Raises ``OSError`` when the file is locked, read-only, or
    otherwise unavailable.
    """
    fd = os.open(path, os.O_RDWR | getattr(os, "O_BINARY", 0))
    try:
        if sys.platform == "win32":
            length = max(os.fstat(fd).st_size, 1)
            msvcrt.locking(fd, msvcrt.LK_NBLCK, length)
            msvcrt.locking(fd, msvcrt.LK_UNLCK, length)
        else:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
            fcntl.flock(fd, fcntl.LOCK_UN)
    finally:
        os.close(fd)


class DeepPermissionScanner:
    """
    Tries to open every file in the tree exclusively, in parallel.

    Each worker returns its own finding; the scanning thread merges them,
    so workers share nothing.
    """

    def __init__(self, max_workers: int | None = None):
        """
        Args:
            max_workers: Thread pool size. Defaults to the CPU count.
        """
        self.max_workers = max_workers or os.cpu_count() or 1

    def check(self, source: str) -> list[Problem]:
        """Return one problem per file that could not be opened exclusively."""
        walk_problems: list[Problem] = []

        def _on_walk_error(error: OSError):
            walk_problems.append(
                Problem(f"Could not list {error.filename}", ProblemCategory.PERMISSION, error)
            )

        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="deep-scan"
        ) as executor:
            # map() keeps results in walk order
            results = list(executor.map(self._probe, self._iter_files(source, _on_walk_error)))

        problems = walk_problems + [problem for problem in results if problem is not None]
        logger.info(f"Deep permission scan of {source}: {len(results)} file(s), {len(problems)} problem(s)")
        return problems

    @staticmethod
    def _iter_files(source: str, onerror) -> Iterator[str]:
        for dirpath, _dirnames, filenames in os.walk(source, onerror=onerror):
            for name in filenames:
                path = os.path.join(dirpath, name)
                # Links are copied as links, their targets are not moved
                if not os.path.islink(path):
                    yield path

    @staticmethod
    def _probe(path: str) -> Problem | None:
        try:
            open_exclusively(path)
        except OSError as e:
            logger.debug(f"Cannot open {path} exclusively: {e}")
            return Problem(f"Could not get exclusive access to {path}", ProblemCategory.PERMISSION, e)
        return None
