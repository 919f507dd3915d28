"""Core request types for FolderRelocator."""

from .request import MoveRequest

__all__ = [
    "MoveRequest",
]
