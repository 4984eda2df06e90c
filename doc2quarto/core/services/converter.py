"""
Converter service — turn a Docusaurus docs tree into a Quarto tree.

Reads each markdown file, runs it through ``md_transforms.convert_content``,
writes the result with a ``.qmd`` suffix at the mirrored location under the
destination root, and copies any sibling ``img/`` folder next to it.

Per-file problems (unreadable source, unwritable destination, a file that
is not under the source root) are captured in a FileReceipt.  The batch
keeps going.
"""

from __future__ import annotations

import logging
import shutil
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from doc2quarto.core.models.conversion import ConversionConfig, FileReceipt
from doc2quarto.core.services.md_transforms import convert_content

logger = logging.getLogger(__name__)


class ConversionError(Exception):
    """Raised when a file cannot be mapped into the destination tree."""


@dataclass
class ConversionReport:
    """Result of converting a whole source tree."""

    source: str = ""
    dest: str = ""
    dry_run: bool = False
    receipts: list[FileReceipt] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.receipts)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.receipts if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.receipts if r.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.receipts if r.status == "skipped")

    @property
    def all_ok(self) -> bool:
        return self.failed == 0

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.succeeded > 0 or self.skipped > 0:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "dest": self.dest,
            "dry_run": self.dry_run,
            "status": self.status,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


# ── Path mapping ────────────────────────────────────────────────────


def destination_for(
    source_file: Path,
    source_root: Path,
    dest_root: Path,
    extension: str = "qmd",
) -> Path:
    """Mirror ``source_file`` under ``dest_root`` with a new suffix.

    ``docs/guide/intro.md`` under root ``docs`` with destination ``out``
    maps to ``out/guide/intro.qmd``.

    Raises:
        ConversionError: If ``source_file`` is not inside ``source_root``.
    """
    try:
        relative = source_file.relative_to(source_root)
    except ValueError as e:
        raise ConversionError(
            f"{source_file} is not under source root {source_root}"
        ) from e

    logger.debug("Relative path: %s", relative)
    return (dest_root / relative).with_suffix(f".{extension}")


def discover_markdown_files(source_root: Path, source_extension: str = "md") -> list[Path]:
    """Find every ``*.<source_extension>`` file under ``source_root``, sorted."""
    suffix = f".{source_extension.lstrip('.')}"
    return sorted(
        p for p in source_root.rglob(f"*{suffix}")
        if p.is_file() and p.suffix == suffix
    )


# ── Assets ──────────────────────────────────────────────────────────


def copy_img_folder(source_file: Path, dest_file: Path, assets_dir: str = "img") -> int:
    """Copy the ``img/`` folder beside ``source_file`` to beside ``dest_file``.

    Files are copied byte for byte, keeping their names.  Nothing happens
    when the source has no such folder.

    Returns:
        Number of files copied.
    """
    img_folder = source_file.parent / assets_dir
    if not img_folder.is_dir():
        return 0

    dest_img = dest_file.parent / assets_dir
    if dest_img.resolve() == img_folder.resolve():
        logger.debug("Assets already in place at %s", img_folder)
        return 0
    dest_img.mkdir(parents=True, exist_ok=True)

    copied = 0
    for entry in sorted(img_folder.iterdir()):
        if not entry.is_file():
            logger.debug("Skipping non-file asset entry: %s", entry)
            continue
        shutil.copyfile(entry, dest_img / entry.name)
        copied += 1

    logger.debug("Copied %d asset(s) from %s to %s", copied, img_folder, dest_img)
    return copied


# ── Single file ─────────────────────────────────────────────────────


def process_file(
    source_file: Path,
    source_root: Path,
    dest_root: Path,
    *,
    extension: str = "qmd",
    assets_dir: str = "img",
    dry_run: bool = False,
) -> FileReceipt:
    """Convert one Docusaurus markdown file and write its Quarto twin.

    Never raises for per-file failures; they are returned as a
    ``failed`` receipt.  In dry-run mode the destination is computed but
    nothing is written, and the receipt is ``skipped``.
    """
    receipt = FileReceipt(source=str(source_file))
    start = time.monotonic()

    try:
        # Raw bytes keep a lone "\r" inside a line intact.
        raw = source_file.read_bytes()
        receipt.bytes_read = len(raw)
        content = raw.decode("utf-8")
        logger.debug("Read %d bytes from %s", receipt.bytes_read, source_file)

        data = convert_content(content).encode("utf-8")
        logger.debug("Converted content: %d bytes", len(data))

        dest_path = destination_for(source_file, source_root, dest_root, extension)
        receipt.destination = str(dest_path)
        logger.debug("Destination path: %s", dest_path)

        if dry_run:
            receipt.status = "skipped"
            receipt.metadata["reason"] = "dry-run"
        else:
            dest_path.parent.mkdir(parents=True, exist_ok=True)
            dest_path.write_bytes(data)
            receipt.bytes_written = len(data)
            logger.debug("Written to: %s", dest_path)

            receipt.assets_copied = copy_img_folder(source_file, dest_path, assets_dir)

    except (OSError, UnicodeDecodeError, ConversionError) as e:
        logger.error("Failed to process %s: %s", source_file, e)
        receipt.status = "failed"
        receipt.error = str(e)

    receipt.duration_ms = int((time.monotonic() - start) * 1000)
    return receipt


# ── Whole tree ──────────────────────────────────────────────────────


def convert_tree(
    config: ConversionConfig,
    files: list[Path] | None = None,
    on_progress: Callable[[FileReceipt], None] | None = None,
) -> ConversionReport:
    """Convert every markdown file under ``config.source``.

    Args:
        config: What to convert and where to write it.
        files: Pre-discovered files (default: discover under the source).
        on_progress: Called with each receipt as soon as a file is done.

    Returns:
        ConversionReport with one receipt per file.
    """
    if files is None:
        files = discover_markdown_files(config.source, config.source_extension)

    report = ConversionReport(
        source=str(config.source),
        dest=str(config.dest),
        dry_run=config.dry_run,
    )

    for md_file in files:
        receipt = process_file(
            md_file,
            config.source,
            config.dest,
            extension=config.extension,
            assets_dir=config.assets_dir,
            dry_run=config.dry_run,
        )
        report.receipts.append(receipt)
        if receipt.ok:
            logger.info("Converted %s -> %s", md_file.name, receipt.destination)
        if on_progress is not None:
            on_progress(receipt)

    logger.info(
        "Conversion finished: %d/%d succeeded, %d failed",
        report.succeeded, report.total, report.failed,
    )
    return report
