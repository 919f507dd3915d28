"""Move request describing one directory relocation."""

from dataclasses import dataclass
from pathlib import Path

from ..config.models import RelocatorConfig


@dataclass(frozen=True)
class MoveRequest:
    """
    A single relocation: where the tree lives now, where it should go,
    and the policy flags validation runs under.

    Paths are kept as the raw strings the caller supplied so that format
    validation sees exactly what was typed.
    """

    source: str
    destination: str
    safe_mode: bool = True
    deep_permission_check: bool = False

    @property
    def source_path(self) -> Path:
        """Source as a Path."""
        return Path(self.source)

    @property
    def destination_path(self) -> Path:
        """Destination as a Path."""
        return Path(self.destination)

    @classmethod
    def from_config(
        cls,
        source: str | Path,
        destination: str | Path,
        config: RelocatorConfig,
    ) -> "MoveRequest":
        """Build a request whose policy flags come from configuration."""
        return cls(
            source=str(source),
            destination=str(destination),
            safe_mode=config.safe_mode,
            deep_permission_check=config.deep_permission_check,
        )
