"""Configuration module for FolderRelocator."""

from .manager import ConfigManager
from .models import LoggingSettings, RelocatorConfig

__all__ = [
    "RelocatorConfig",
    "LoggingSettings",
    "ConfigManager",
]
