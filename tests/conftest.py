"""
Shared test fixtures and configuration.
"""

import textwrap
from pathlib import Path

import pytest

INTRO_MD = textwrap.dedent("""\
    ---
    title: Intro
    sidebar_position: 1
    ---
    # Welcome

    :::tip Quick start
    Run the installer.
    :::
""")

GUIDE_MD = textwrap.dedent("""\
    ---
    title: "Guide"
    sidebar_position: 2
    ---
    :::danger
    Do not run as root.
    :::
""")


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def docs_tree(tmp_path: Path) -> Path:
    """Build a small Docusaurus docs tree and return its root.

    docs/
        intro.md
        img/logo.png
        guide/
            setup.md
            img/diagram.svg
            notes.txt
    """
    root = tmp_path / "docs"
    (root / "img").mkdir(parents=True)
    (root / "guide" / "img").mkdir(parents=True)

    (root / "intro.md").write_text(INTRO_MD, encoding="utf-8")
    (root / "img" / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x01")
    (root / "guide" / "setup.md").write_text(GUIDE_MD, encoding="utf-8")
    (root / "guide" / "img" / "diagram.svg").write_text("<svg/>", encoding="utf-8")
    (root / "guide" / "notes.txt").write_text("not markdown", encoding="utf-8")
    return root


@pytest.fixture
def dest_dir(tmp_path: Path) -> Path:
    """Return a (not yet created) destination directory."""
    return tmp_path / "out"
