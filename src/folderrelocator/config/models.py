"""Configuration models using Pydantic for validation."""

import re
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_dir: Path = Field(default=Path("logs"), description="Directory for log files")
    max_bytes: int = Field(
        default=10 * 1024 * 1024, ge=1024, description="Max log file size before rotation (bytes)"
    )
    backup_count: int = Field(default=5, ge=1, description="Number of rotated log files to keep")
    console_enabled: bool = Field(default=True, description="Enable console logging")
    file_enabled: bool = Field(default=True, description="Enable file logging")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper


class RelocatorConfig(BaseModel):
    """Main configuration for FolderRelocator."""

    # Validation policy
    safe_mode: bool = Field(
        default=True,
        description="Refuse to move application folders such as Program Files",
    )
    deep_permission_check: bool = Field(
        default=False,
        description="Try to open every file in the source tree exclusively before moving",
    )
    deep_scan_workers: int | None = Field(
        default=None,
        ge=1,
        description="Worker threads for the deep permission scan (defaults to CPU count)",
    )
    match_denied_subpaths: bool = Field(
        default=True,
        description="Also reject folders nested inside a denied system folder",
    )
    extra_denied_paths: list[Path] = Field(
        default_factory=list, description="Additional folders that may never be moved"
    )
    path_pattern: str | None = Field(
        default=None,
        description="Regex both paths must match (defaults to the platform's absolute path shape)",
    )

    # Move behaviour
    verify_sizes: bool = Field(
        default=False,
        description="Compare file sizes of the copy before deleting the source",
    )
    create_link: bool = Field(
        default=True,
        description="Leave a directory link at the old location after moving",
    )

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings, description="Logging settings"
    )

    @field_validator("path_pattern")
    @classmethod
    def validate_path_pattern(cls, v: str | None) -> str | None:
        """Ensure the path pattern compiles."""
        if v is None:
            return v
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid path pattern {v!r}: {e}") from e
        return v

    class Config:
        """Pydantic config."""

        validate_assignment = True
        extra = "forbid"  # Raise error on unknown fields
