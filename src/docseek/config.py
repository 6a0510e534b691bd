"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from docseek.exceptions import ConfigurationError

WEEK_IN_SECONDS = 604800.0
SNAPSHOT_NAME = ".data.json"


@dataclass(slots=True)
class AppConfig:
    snapshot_name: str = SNAPSHOT_NAME
    stale_after: float = WEEK_IN_SECONDS
    filetype: str = "pdf"

    def __post_init__(self) -> None:
        if not self.snapshot_name or Path(self.snapshot_name).name != self.snapshot_name:
            raise ConfigurationError(
                f"Snapshot name must be a bare file name: {self.snapshot_name!r}"
            )
        if self.stale_after <= 0:
            raise ConfigurationError(
                f"Staleness threshold must be positive, got {self.stale_after}"
            )
        if not self.filetype.strip("."):
            raise ConfigurationError("A filetype extension is required")

    def resolve_snapshot_path(self, directory: Path) -> Path:
        return Path(directory) / self.snapshot_name
