"""Free-space check on the destination volume."""

import os
import shutil
from collections.abc import Callable
from pathlib import Path

from ..utils.logging import get_logger
from .existence import destination_parent
from .report import Problem, ProblemCategory

logger = get_logger(__name__)

# Sizes in messages are decimal megabytes
BYTES_PER_MB = 1_000_000


def tree_size(root: str | Path) -> int:
    """
    Total size in bytes of every file below ``root``.

    Symlinks are counted by their own size and never followed.

    Raises:
        OSError: If a directory cannot be listed or a file cannot be stat'ed.
    """

    def _raise(error: OSError):
        raise error

    total = 0
    for dirpath, _dirnames, filenames in os.walk(root, onerror=_raise):
        for name in filenames:
            total += os.lstat(os.path.join(dirpath, name)).st_size
    return total


def nearest_existing(path: Path) -> Path:
    """``path`` or its closest existing ancestor."""
    while not path.exists() and path.parent != path:
        path = path.parent
    return path


class CapacityChecker:
    """Compares the source tree's size with the destination volume's free space."""

    def __init__(self, disk_usage: Callable[[str], object] | None = None):
        """
        Args:
            disk_usage: ``shutil.disk_usage`` compatible callable, replaceable in tests.
        """
        self.disk_usage = disk_usage or shutil.disk_usage

    def check(self, source: str, destination: str) -> list[Problem]:
        """Return a capacity problem when the destination is too small."""
        try:
            required = tree_size(source)
        except OSError as e:
            return [Problem(f"Could not measure the size of {source}", ProblemCategory.CAPACITY, e)]

        volume = nearest_existing(destination_parent(destination))
        drive = volume.anchor or str(volume)
        try:
            available = self.disk_usage(str(volume)).free
        except OSError as e:
            return [Problem(f"Could not read free space on the {drive} disk", ProblemCategory.CAPACITY, e)]

        logger.debug(f"{required} bytes required, {available} bytes available on {drive}")
        if available < required:
            message = (
                f"There is not enough free space on the {drive} disk. "
                f"{required // BYTES_PER_MB}MB required, {available // BYTES_PER_MB} available."
            )
            logger.warning(message)
            return [Problem(message, ProblemCategory.CAPACITY)]
        return []
