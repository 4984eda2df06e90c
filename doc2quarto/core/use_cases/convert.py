"""
Convert use case — validate the roots, then convert the whole tree.

Run-level problems (missing source, destination that cannot be created,
nothing to convert) come back in ``ConvertResult.error``.  Per-file
problems live in the report's receipts.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from doc2quarto.core.models.conversion import ConversionConfig, FileReceipt
from doc2quarto.core.services.converter import (
    ConversionReport,
    convert_tree,
    discover_markdown_files,
)

logger = logging.getLogger(__name__)


@dataclass
class ConvertResult:
    """Result of a conversion run."""

    config: ConversionConfig | None = None
    report: ConversionReport | None = None
    files_found: int = 0
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        result["files_found"] = self.files_found
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def prepare_conversion(config: ConversionConfig) -> tuple[list[Path], str | None]:
    """Check the roots and discover the files to convert.

    Returns:
        (files, error) — ``error`` is None when the run can proceed.
    """
    if not config.source.is_dir():
        return [], f"Source directory does not exist: {config.source}"

    if not config.dry_run:
        try:
            config.dest.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return [], f"Failed to create destination directory: {e}"

    files = discover_markdown_files(config.source, config.source_extension)
    if not files:
        return [], f"No .{config.source_extension} files found in source directory"

    logger.info("Found %d .%s files in %s", len(files), config.source_extension, config.source)
    return files, None


def run_conversion(
    config: ConversionConfig,
    files: list[Path] | None = None,
    on_progress: Callable[[FileReceipt], None] | None = None,
) -> ConvertResult:
    """Convert every markdown file under ``config.source`` into ``config.dest``.

    Args:
        config: Validated conversion settings.
        files: Files from a previous ``prepare_conversion`` call.  When
            None, the roots are checked and files discovered here.
        on_progress: Called with each file's receipt as it completes.
    """
    result = ConvertResult(config=config)

    if files is None:
        files, error = prepare_conversion(config)
        if error:
            logger.error(error)
            result.error = error
            return result

    result.files_found = len(files)
    result.report = convert_tree(config, files=files, on_progress=on_progress)
    return result
