"""Presence checks for the source tree and the destination location."""

import os
from pathlib import Path

from ..utils.logging import get_logger
from .report import Problem, ProblemCategory

logger = get_logger(__name__)


def destination_parent(destination: str) -> Path:
    """
    Directory the destination folder will be created in.

    Raises:
        ValueError: If the destination is a filesystem root and has no parent.
    """
    path = Path(destination)
    if path.parent == path:
        raise ValueError(f"Destination {destination} has no parent directory")
    return path.parent


class ExistenceChecker:
    """Source must exist, destination must not, destination's parent must."""

    def check(self, source: str, destination: str) -> list[Problem]:
        """Return precondition problems for the pair of paths."""
        problems: list[Problem] = []

        # rmtree cannot remove a linked source
        if os.path.islink(source):
            problems.append(
                Problem("Source folder is a symbolic link", ProblemCategory.PRECONDITION)
            )
        elif not os.path.isdir(source):
            problems.append(Problem("Source folder does not exist", ProblemCategory.PRECONDITION))

        # Any existing entry blocks the move so trees are never merged
        if os.path.lexists(destination):
            problems.append(
                Problem(
                    "Destination folder already contains a folder with the same name",
                    ProblemCategory.PRECONDITION,
                )
            )

        try:
            if not os.path.isdir(destination_parent(destination)):
                problems.append(
                    Problem("Destination folder does not exist", ProblemCategory.PRECONDITION)
                )
        except (OSError, ValueError) as e:
            problems.append(Problem(str(e), ProblemCategory.PRECONDITION, e))

        for problem in problems:
            logger.info(f"Precondition failed: {problem.message}")
        return problems
