"""
Conversion models — what to convert, and what happened to each file.

ConversionConfig is loaded from doc2quarto.yml and/or CLI flags.
FileReceipt is the per-file outcome: the converter records failures in
the receipt instead of raising, so one bad file never stops a run.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class ConversionConfig(BaseModel):
    """Settings for one conversion run."""

    source: Path
    dest: Path
    extension: str = "qmd"          # written file suffix, without the dot
    source_extension: str = "md"    # suffix of files picked up from source
    assets_dir: str = "img"         # sibling folder copied next to each file
    dry_run: bool = False

    @field_validator("extension", "source_extension")
    @classmethod
    def _strip_dot(cls, value: str) -> str:
        value = value.strip().lstrip(".")
        if not value:
            raise ValueError("extension must not be empty")
        return value


class FileReceipt(BaseModel):
    """Result of converting a single markdown file."""

    source: str
    destination: str = ""
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    bytes_read: int = 0
    bytes_written: int = 0
    assets_copied: int = 0
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the file was converted and written."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the conversion failed."""
        return self.status == "failed"

    @property
    def name(self) -> str:
        """File name of the source, for display."""
        return Path(self.source).name
