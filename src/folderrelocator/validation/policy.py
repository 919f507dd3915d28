"""Deny-list and critical-folder checks on the source directory."""

import os
from collections.abc import Iterable
from pathlib import Path

from ..utils.logging import get_logger
from .path_format import resolve_path
from .report import Problem, ProblemCategory

logger = get_logger(__name__)

POSIX_DENIED_PATHS = (
    "/",
    "/bin",
    "/boot",
    "/dev",
    "/etc",
    "/lib",
    "/proc",
    "/sbin",
    "/sys",
    "/usr",
    "/var",
)

POSIX_CRITICAL_PATHS = (
    "/opt",
    "/Applications",
)


def default_denied_paths() -> list[str]:
    """Operating-system folders that must never be moved."""
    if os.name == "nt":
        system_root = os.environ.get("SystemRoot", r"C:\Windows")
        return [
            system_root,
            os.path.join(system_root, "System32"),
            os.path.join(system_root, "Config"),
            os.environ.get("ProgramData", r"C:\ProgramData"),
        ]
    return list(POSIX_DENIED_PATHS)


def default_critical_paths() -> list[str]:
    """Application folders that safe mode refuses to move."""
    if os.name == "nt":
        return [
            os.environ.get("ProgramFiles", r"C:\Program Files"),
            os.environ.get("ProgramFiles(x86)", r"C:\Program Files (x86)"),
        ]
    return list(POSIX_CRITICAL_PATHS)


def _normalize(path: str | Path) -> str:
    return os.path.normcase(os.path.abspath(path))


def is_same_or_inside(candidate: str, root: str, match_subpaths: bool = True) -> bool:
    """
    Check whether a normalized path equals a protected root or lies beneath it.

    A filesystem anchor such as ``/`` or ``C:\\`` only ever matches itself,
    otherwise every path on the volume would be protected.
    """
    if candidate == root:
        return True
    if not match_subpaths or root == _normalize(Path(root).anchor or root):
        return False
    try:
        return os.path.commonpath([candidate, root]) == root
    except ValueError:
        # Different drives
        return False


class PolicyGuard:
    """Refuses to move operating-system and (in safe mode) application folders."""

    def __init__(
        self,
        denied_paths: Iterable[str | Path] | None = None,
        critical_paths: Iterable[str | Path] | None = None,
        match_subpaths: bool = True,
    ):
        """
        Args:
            denied_paths: Folders that may never be moved. Defaults to the
                platform's system folders.
            critical_paths: Folders rejected only in safe mode.
            match_subpaths: Also reject folders nested inside a listed folder.
                When False only an exact match is rejected.
        """
        if denied_paths is None:
            denied_paths = default_denied_paths()
        if critical_paths is None:
            critical_paths = default_critical_paths()
        self.denied_paths = [_normalize(p) for p in denied_paths]
        self.critical_paths = [_normalize(p) for p in critical_paths]
        self.match_subpaths = match_subpaths

    def check(self, source: str, safe_mode: bool) -> list[Problem]:
        """Return policy problems for the source path."""
        try:
            resolved = os.path.normcase(str(resolve_path(source)))
        except (OSError, ValueError):
            # Already reported by the path format check
            return []
        # The typed path and its symlink-free form are both checked
        candidates = {resolved, _normalize(source)}

        problems: list[Problem] = []

        for root in self.denied_paths:
            if self._matches(candidates, root):
                problems.append(
                    Problem(f'The "{source}" directory cannot be moved.', ProblemCategory.POLICY)
                )
                break

        if safe_mode:
            for root in self.critical_paths:
                if self._matches(candidates, root):
                    problems.append(
                        Problem(
                            f"It's recommended not to move the {source} directory, "
                            "you can disable safe mode in the settings to override this check",
                            ProblemCategory.POLICY,
                        )
                    )
                    break

        for problem in problems:
            logger.warning(problem.message)
        return problems

    def _matches(self, candidates: set[str], root: str) -> bool:
        return any(is_same_or_inside(c, root, self.match_subpaths) for c in candidates)
