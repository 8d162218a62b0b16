from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ProcessResult:
    """Outcome of anonymizing or restoring a file or folder."""

    success: bool
    files_processed: int = 0
    pii_found: int = 0
    output_path: Path | None = None
    mapping_path: Path | None = None
    errors: list[str] = field(default_factory=list)
