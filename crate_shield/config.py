"""Run configuration for crate-shield."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DATABASE_ENV_VAR = "CRATE_SHIELD_DATABASE"
DEFAULT_LOCKFILE = Path("Cargo.lock")
OUTPUT_FORMATS = ("text", "json")


@dataclass
class AuditConfig:
    """Configuration for one audit run."""

    database_path: Path
    lockfile_path: Path = DEFAULT_LOCKFILE
    output_format: str = "text"
    output_file: Optional[Path] = None
    verbose: bool = False

    def __post_init__(self) -> None:
        """Validate configuration."""
        self.database_path = Path(self.database_path)
        self.lockfile_path = Path(self.lockfile_path)
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unknown output format {self.output_format!r}, expected one of {', '.join(OUTPUT_FORMATS)}"
            )
        if not self.database_path.exists():
            raise ValueError(f"Database path does not exist: {self.database_path}")
