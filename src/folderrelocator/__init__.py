"""
FolderRelocator - move a folder to another drive and leave a link behind.

Checks that a move is safe before touching anything, copies the tree with
cooperative cancellation, and removes the original only after a clean copy.
"""

__version__ = "0.1.0"
__author__ = "FolderRelocator Team"
__license__ = "MIT"

from .config import RelocatorConfig
from .core import MoveRequest
from .links import create_directory_link
from .mover import CancelToken, MoveOrchestrator, MoveResult, MoveStatus
from .utils.logging import get_logger
from .validation import Problem, ValidationPipeline, ValidationReport, validate_request

__all__ = [
    "get_logger",
    "RelocatorConfig",
    # Request
    "MoveRequest",
    # Validation
    "Problem",
    "ValidationReport",
    "ValidationPipeline",
    "validate_request",
    # Mover
    "CancelToken",
    "MoveOrchestrator",
    "MoveResult",
    "MoveStatus",
    # Links
    "create_directory_link",
]
