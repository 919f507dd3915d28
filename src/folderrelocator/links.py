"""Directory links left behind at a vacated source path."""

import contextlib
import os
from pathlib import Path

from .utils.logging import get_logger

logger = get_logger(__name__)


def create_directory_link(link_path: str | Path, target: str | Path) -> Path:
    """
    Create a directory symbolic link at ``link_path`` pointing to ``target``.

    On Windows this needs either administrator rights or Developer Mode.

    Raises:
        OSError: If the link cannot be created.
    """
    link_path = Path(link_path)
    os.symlink(str(target), str(link_path), target_is_directory=True)
    logger.info(f"Linked {link_path} -> {target}")
    return link_path


def remove_directory_link(link_path: str | Path) -> None:
    """Remove a directory link without touching its target. Missing links are ignored."""
    link_path = Path(link_path)
    if not os.path.lexists(link_path):
        return
    try:
        os.unlink(link_path)
    except (IsADirectoryError, PermissionError):
        # Windows removes directory symlinks with rmdir
        with contextlib.suppress(OSError):
            os.rmdir(link_path)
