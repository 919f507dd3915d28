"""Pre-move validation: format, policy, existence, permissions, capacity."""

from .capacity import CapacityChecker, tree_size
from .deep_scan import DeepPermissionScanner, open_exclusively
from .existence import ExistenceChecker
from .path_format import (
    POSIX_PATH_PATTERN,
    WINDOWS_PATH_PATTERN,
    PathFormatValidator,
    default_path_pattern,
)
from .permissions import PermissionProbe
from .pipeline import ValidationPipeline, validate_request
from .policy import PolicyGuard, default_critical_paths, default_denied_paths
from .report import Problem, ProblemCategory, ValidationReport

__all__ = [
    # Report
    "Problem",
    "ProblemCategory",
    "ValidationReport",
    # Checkers
    "PathFormatValidator",
    "PolicyGuard",
    "ExistenceChecker",
    "PermissionProbe",
    "CapacityChecker",
    "DeepPermissionScanner",
    # Pipeline
    "ValidationPipeline",
    "validate_request",
    # Helpers
    "WINDOWS_PATH_PATTERN",
    "POSIX_PATH_PATTERN",
    "default_path_pattern",
    "default_denied_paths",
    "default_critical_paths",
    "open_exclusively",
    "tree_size",
]
