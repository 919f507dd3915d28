"""Mover module: cancellable tree copy followed by removal of the original."""

from .cancel import CancelToken
from .copier import CopyEngine, CopyOutcome, CopyStatus, copy_directory
from .mover import MoveOrchestrator, MoveResult, MoveStatus

__all__ = [
    "CancelToken",
    "CopyEngine",
    "CopyOutcome",
    "CopyStatus",
    "copy_directory",
    "MoveOrchestrator",
    "MoveResult",
    "MoveStatus",
]
