"""
Doc2Quarto — CLI entrypoint.

Usage:
    python -m doc2quarto.main --help
    python -m doc2quarto.main convert --source docs --dest quarto
"""

from __future__ import annotations

import os
from pathlib import Path

import click

from doc2quarto import __version__
from doc2quarto.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="doc2quarto")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to doc2quarto.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Doc2Quarto — convert Docusaurus markdown to Quarto format."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("DOC2QUARTO_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("DOC2QUARTO_LOG_FILE"),
        log_file_level=os.environ.get("DOC2QUARTO_LOG_FILE_LEVEL"),
    )


# ── Register sub-commands from doc2quarto/ui/cli/ ─────────────────

from doc2quarto.ui.cli.convert import convert  # noqa: E402

cli.add_command(convert)


if __name__ == "__main__":
    cli()
