"""
Tests for the converter service — path mapping, assets, single files, trees.
"""

from pathlib import Path

import pytest

from doc2quarto.core.models.conversion import ConversionConfig, FileReceipt
from doc2quarto.core.services.converter import (
    ConversionError,
    ConversionReport,
    convert_tree,
    copy_img_folder,
    destination_for,
    discover_markdown_files,
    process_file,
)
from doc2quarto.core.services.md_transforms import convert_content


class TestDestinationFor:
    def test_mirrors_relative_path(self, tmp_path: Path):
        src_root = tmp_path / "docs"
        dest = destination_for(src_root / "guide" / "intro.md", src_root, tmp_path / "out")
        assert dest == tmp_path / "out" / "guide" / "intro.qmd"

    def test_top_level_file(self, tmp_path: Path):
        dest = destination_for(tmp_path / "a.md", tmp_path, tmp_path / "out")
        assert dest == tmp_path / "out" / "a.qmd"

    def test_custom_extension(self, tmp_path: Path):
        dest = destination_for(tmp_path / "a.md", tmp_path, tmp_path / "out", extension="markdown")
        assert dest.name == "a.markdown"

    def test_only_last_suffix_replaced(self, tmp_path: Path):
        dest = destination_for(tmp_path / "v1.2.md", tmp_path, tmp_path / "out")
        assert dest.name == "v1.2.qmd"

    def test_outside_root_raises(self, tmp_path: Path):
        with pytest.raises(ConversionError, match="not under source root"):
            destination_for(tmp_path / "elsewhere" / "a.md", tmp_path / "docs", tmp_path / "out")


class TestDiscoverMarkdownFiles:
    def test_finds_nested_md_only(self, docs_tree: Path):
        files = discover_markdown_files(docs_tree)
        assert files == [docs_tree / "guide" / "setup.md", docs_tree / "intro.md"]

    def test_ignores_directories_named_like_md(self, tmp_path: Path):
        (tmp_path / "folder.md").mkdir()
        (tmp_path / "real.md").write_text("x")
        assert discover_markdown_files(tmp_path) == [tmp_path / "real.md"]

    def test_other_extension(self, tmp_path: Path):
        (tmp_path / "a.mdx").write_text("x")
        (tmp_path / "b.md").write_text("x")
        assert discover_markdown_files(tmp_path, "mdx") == [tmp_path / "a.mdx"]

    def test_empty(self, tmp_path: Path):
        assert discover_markdown_files(tmp_path) == []


class TestCopyImgFolder:
    def test_copies_files_byte_for_byte(self, docs_tree: Path, dest_dir: Path):
        dest_file = dest_dir / "intro.qmd"
        copied = copy_img_folder(docs_tree / "intro.md", dest_file)
        assert copied == 1
        assert (dest_dir / "img" / "logo.png").read_bytes() == (
            docs_tree / "img" / "logo.png"
        ).read_bytes()

    def test_no_img_folder_is_noop(self, tmp_path: Path, dest_dir: Path):
        (tmp_path / "page.md").write_text("x")
        assert copy_img_folder(tmp_path / "page.md", dest_dir / "page.qmd") == 0
        assert not (dest_dir / "img").exists()

    def test_img_file_not_folder_is_noop(self, tmp_path: Path, dest_dir: Path):
        (tmp_path / "img").write_text("not a folder")
        assert copy_img_folder(tmp_path / "page.md", dest_dir / "page.qmd") == 0

    def test_nested_directories_skipped(self, tmp_path: Path, dest_dir: Path):
        (tmp_path / "img" / "sub").mkdir(parents=True)
        (tmp_path / "img" / "a.png").write_bytes(b"a")
        assert copy_img_folder(tmp_path / "page.md", dest_dir / "page.qmd") == 1
        assert not (dest_dir / "img" / "sub").exists()

    def test_same_folder_is_noop(self, tmp_path: Path):
        (tmp_path / "img").mkdir()
        (tmp_path / "img" / "a.png").write_bytes(b"a")
        assert copy_img_folder(tmp_path / "page.md", tmp_path / "page.qmd") == 0
        assert (tmp_path / "img" / "a.png").read_bytes() == b"a"

    def test_custom_assets_dir(self, tmp_path: Path, dest_dir: Path):
        (tmp_path / "assets").mkdir()
        (tmp_path / "assets" / "a.png").write_bytes(b"a")
        copied = copy_img_folder(tmp_path / "page.md", dest_dir / "page.qmd", assets_dir="assets")
        assert copied == 1
        assert (dest_dir / "assets" / "a.png").exists()


class TestProcessFile:
    def test_converts_and_writes(self, docs_tree: Path, dest_dir: Path):
        receipt = process_file(docs_tree / "guide" / "setup.md", docs_tree, dest_dir)
        assert receipt.ok
        out = dest_dir / "guide" / "setup.qmd"
        assert receipt.destination == str(out)
        text = out.read_text(encoding="utf-8")
        assert text.startswith("---\n")
        assert "order: 2" in text
        assert 'title: "Guide"' in text
        assert ":::: {important}\n" in text
        assert text.endswith("::::\n")
        assert receipt.bytes_written == len(text.encode("utf-8"))
        assert receipt.bytes_read > 0

    def test_lone_carriage_return_kept_inside_line(self, tmp_path: Path, dest_dir: Path):
        text = "row a\rrow b\n:::\r\n"
        src = tmp_path / "page.md"
        src.write_bytes(text.encode("utf-8"))
        receipt = process_file(src, tmp_path, dest_dir)
        assert receipt.ok
        out = (dest_dir / "page.qmd").read_bytes()
        assert out == convert_content(text).encode("utf-8")
        assert out == b"row a\rrow b\n::::\n"

    def test_bytes_read_counts_crlf_on_disk(self, tmp_path: Path, dest_dir: Path):
        src = tmp_path / "page.md"
        src.write_bytes(b"a\r\nb\r\n")
        receipt = process_file(src, tmp_path, dest_dir)
        assert receipt.bytes_read == 6
        assert (dest_dir / "page.qmd").read_bytes() == b"a\nb\n"

    def test_dest_same_as_source_keeps_images(self, docs_tree: Path):
        receipt = process_file(docs_tree / "guide" / "setup.md", docs_tree, docs_tree)
        assert receipt.ok, receipt.error
        assert receipt.assets_copied == 0
        assert (docs_tree / "guide" / "setup.qmd").is_file()
        assert (docs_tree / "guide" / "img" / "diagram.svg").read_text() == "<svg/>"

    def test_copies_sibling_images(self, docs_tree: Path, dest_dir: Path):
        receipt = process_file(docs_tree / "guide" / "setup.md", docs_tree, dest_dir)
        assert receipt.assets_copied == 1
        assert (dest_dir / "guide" / "img" / "diagram.svg").read_text() == "<svg/>"

    def test_dry_run_writes_nothing(self, docs_tree: Path, dest_dir: Path):
        receipt = process_file(docs_tree / "intro.md", docs_tree, dest_dir, dry_run=True)
        assert receipt.status == "skipped"
        assert receipt.destination == str(dest_dir / "intro.qmd")
        assert receipt.metadata["reason"] == "dry-run"
        assert not dest_dir.exists()

    def test_missing_source_is_failed_receipt(self, tmp_path: Path, dest_dir: Path):
        receipt = process_file(tmp_path / "gone.md", tmp_path, dest_dir)
        assert receipt.failed
        assert receipt.error

    def test_outside_root_is_failed_receipt(self, tmp_path: Path, dest_dir: Path):
        src = tmp_path / "page.md"
        src.write_text("x")
        receipt = process_file(src, tmp_path / "docs", dest_dir)
        assert receipt.failed
        assert "not under source root" in receipt.error

    def test_undecodable_source_is_failed_receipt(self, tmp_path: Path, dest_dir: Path):
        src = tmp_path / "binary.md"
        src.write_bytes(b"\xff\xfe\xfa")
        receipt = process_file(src, tmp_path, dest_dir)
        assert receipt.failed

    def test_unwritable_destination_is_failed_receipt(self, tmp_path: Path):
        src = tmp_path / "docs" / "page.md"
        src.parent.mkdir()
        src.write_text("x")
        blocker = tmp_path / "out"
        blocker.write_text("a file where a directory should be")
        receipt = process_file(src, src.parent, blocker)
        assert receipt.failed


class TestConversionReport:
    def test_status_ok_when_empty(self):
        assert ConversionReport().status == "ok"

    def test_status_partial(self):
        report = ConversionReport(receipts=[
            FileReceipt(source="a.md"),
            FileReceipt(source="b.md", status="failed", error="boom"),
        ])
        assert report.status == "partial"
        assert report.succeeded == 1
        assert report.failed == 1
        assert not report.all_ok

    def test_status_failed(self):
        report = ConversionReport(receipts=[FileReceipt(source="a.md", status="failed")])
        assert report.status == "failed"

    def test_to_dict(self):
        report = ConversionReport(source="docs", dest="out", receipts=[FileReceipt(source="a.md")])
        data = report.to_dict()
        assert data["total"] == 1
        assert data["status"] == "ok"
        assert data["receipts"][0]["source"] == "a.md"


class TestConvertTree:
    def test_converts_whole_tree(self, docs_tree: Path, dest_dir: Path):
        config = ConversionConfig(source=docs_tree, dest=dest_dir)
        report = convert_tree(config)
        assert report.total == 2
        assert report.all_ok
        assert (dest_dir / "intro.qmd").is_file()
        assert (dest_dir / "guide" / "setup.qmd").is_file()
        assert (dest_dir / "img" / "logo.png").is_file()
        assert not (dest_dir / "guide" / "notes.txt").exists()

    def test_intro_content(self, docs_tree: Path, dest_dir: Path):
        convert_tree(ConversionConfig(source=docs_tree, dest=dest_dir))
        text = (dest_dir / "intro.qmd").read_text(encoding="utf-8")
        assert text == (
            "---\n"
            "title: Intro\n"
            "order: 1\n"
            "# Welcome\n"
            "\n"
            ":::: {.callout-tip}\n"
            "## Quick start\n"
            "Run the installer.\n"
            "::::\n"
        )

    def test_failure_does_not_stop_others(self, docs_tree: Path, dest_dir: Path):
        bad = docs_tree / "bad.md"
        bad.write_bytes(b"\xff\xfe")
        report = convert_tree(ConversionConfig(source=docs_tree, dest=dest_dir))
        assert report.total == 3
        assert report.failed == 1
        assert report.succeeded == 2
        assert report.status == "partial"
        assert (dest_dir / "intro.qmd").is_file()

    def test_progress_callback(self, docs_tree: Path, dest_dir: Path):
        seen: list[str] = []
        convert_tree(
            ConversionConfig(source=docs_tree, dest=dest_dir),
            on_progress=lambda r: seen.append(r.name),
        )
        assert sorted(seen) == ["intro.md", "setup.md"]

    def test_dry_run(self, docs_tree: Path, dest_dir: Path):
        report = convert_tree(ConversionConfig(source=docs_tree, dest=dest_dir, dry_run=True))
        assert report.skipped == 2
        assert report.status == "ok"
        assert not dest_dir.exists()
