"""Probes that prove the process can perform the move before it starts."""

import contextlib
import os
from collections.abc import Callable
from pathlib import Path

from ..links import create_directory_link, remove_directory_link
from ..utils.logging import get_logger
from .existence import destination_parent
from .path_format import resolve_path
from .report import Problem, ProblemCategory

logger = get_logger(__name__)

PROBE_PREFIX = "deleteme"


def find_probe_path(directory: Path, prefix: str = PROBE_PREFIX) -> Path:
    """First unused ``<prefix><n>`` name inside ``directory``."""
    index = 0
    while os.path.lexists(directory / f"{prefix}{index}"):
        index += 1
    return directory / f"{prefix}{index}"


class PermissionProbe:
    """
    Writes a throwaway file next to the source and a throwaway directory
    link pointing at the destination's parent.

    Both probes are cleaned up whether or not they succeeded.
    """

    def __init__(self, link_factory: Callable[[Path, Path], object] | None = None):
        """
        Args:
            link_factory: Callable ``(link_path, target)`` creating a directory
                link. Defaults to a directory symlink.
        """
        self.link_factory = link_factory or create_directory_link

    def check(self, source: str, destination: str) -> list[Problem]:
        """Return permission problems for the pair of paths."""
        problems: list[Problem] = []

        # The replacement link goes where the source entry is, not where it points
        source_parent = Path(os.path.abspath(source)).parent
        link_target = resolve_path(str(destination_parent(destination)))
        probe_path = find_probe_path(source_parent)
        logger.debug(f"Probing permissions with {probe_path}")

        try:
            self._touch(probe_path)
        except PermissionError as e:
            problems.append(
                Problem(
                    "You do not have the required privileges to move the directory.\n"
                    "Try running as administrator",
                    ProblemCategory.PERMISSION,
                    e,
                )
            )
        except OSError as e:
            problems.append(
                Problem(f"Could not write to {source_parent}", ProblemCategory.PERMISSION, e)
            )
        finally:
            with contextlib.suppress(OSError):
                if os.path.isfile(probe_path) and not os.path.islink(probe_path):
                    os.remove(probe_path)

        try:
            self.link_factory(probe_path, link_target)
        except (OSError, NotImplementedError) as e:
            problems.append(
                Problem(
                    "Could not create a symbolic link.\nTry running as administrator",
                    ProblemCategory.PERMISSION,
                    e,
                )
            )
        finally:
            with contextlib.suppress(OSError):
                remove_directory_link(probe_path)

        for problem in problems:
            logger.warning(f"Permission probe failed: {problem}")
        return problems

    @staticmethod
    def _touch(path: Path) -> None:
        # "x" so an existing file is never truncated
        with open(path, "x"):
            pass
