"""Syntactic checks on the source and destination path strings."""

import os
import re
from pathlib import Path

from ..utils.logging import get_logger
from .report import Problem, ProblemCategory

logger = get_logger(__name__)

# Drive letter, colon, one or two backslashes
WINDOWS_PATH_PATTERN = r"^[A-Za-z]:\\{1,2}"
POSIX_PATH_PATTERN = r"^/"


def default_path_pattern() -> str:
    """Absolute path shape for the running platform."""
    return WINDOWS_PATH_PATTERN if os.name == "nt" else POSIX_PATH_PATTERN


def resolve_path(raw: str) -> Path:
    """
    Resolve a user supplied path to its canonical absolute form.

    Raises:
        ValueError: If the string is empty or contains characters the OS rejects.
        OSError: If the OS refuses to resolve the path.
    """
    if not raw or not raw.strip():
        raise ValueError("Path is empty")
    return Path(raw).resolve()


class PathFormatValidator:
    """Rejects path strings that cannot be resolved or are not rooted."""

    def __init__(self, pattern: str | None = None):
        """
        Args:
            pattern: Regex both paths must match. Defaults to the platform's
                absolute path shape.
        """
        self.pattern = re.compile(pattern or default_path_pattern())

    def check(self, source: str, destination: str) -> list[Problem]:
        """Return format problems for the pair of paths."""
        problems: list[Problem] = []

        # One resolution problem covers both paths
        try:
            resolve_path(source)
            resolve_path(destination)
        except (OSError, ValueError) as e:
            problems.append(Problem("Invalid path", ProblemCategory.FORMAT, e))

        if not self.pattern.match(source) or not self.pattern.match(destination):
            problems.append(Problem("Invalid path format", ProblemCategory.FORMAT))

        if problems:
            logger.debug(f"Path format problems for {source!r} -> {destination!r}: {problems}")
        return problems
