"""
CLI command for converting a Docusaurus docs tree.

Thin wrapper over ``doc2quarto.core.use_cases.convert``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from doc2quarto.core.models.conversion import FileReceipt


@click.command()
@click.option(
    "--source", "-s",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Source directory containing Docusaurus markdown files.",
)
@click.option(
    "--dest", "-d",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Destination directory for converted Quarto files.",
)
@click.option("--dry-run", is_flag=True, help="Show what would be written, write nothing.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def convert(
    ctx: click.Context,
    source: Path | None,
    dest: Path | None,
    dry_run: bool,
    as_json: bool,
) -> None:
    """Convert Docusaurus .md files to Quarto .qmd files.

    Examples:

        doc2quarto convert --source website/docs --dest quarto

        doc2quarto convert -s docs -d out --dry-run
    """
    from doc2quarto.core.config.loader import ConfigError, load_config
    from doc2quarto.core.use_cases.convert import prepare_conversion, run_conversion

    try:
        config = load_config(
            ctx.obj.get("config_path"),
            search=ctx.obj.get("config_path") is None,
            source=source,
            dest=dest,
            dry_run=True if dry_run else None,
        )
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({"error": str(e)}, indent=2))
            return
        click.secho(f"✗ {e}", fg="red")
        sys.exit(1)

    quiet = ctx.obj.get("quiet", False)

    if not as_json and not quiet:
        click.echo()
        click.secho("Doc2Quarto - Docusaurus to Quarto Converter", fg="bright_cyan", bold=True)
        click.secho("=" * 45, fg="bright_black")

    files, error = prepare_conversion(config)
    if error:
        if as_json:
            click.echo(json.dumps({"error": error}, indent=2))
            return
        click.secho(f"✗ {error}", fg="red")
        sys.exit(1)

    if as_json:
        result = run_conversion(config, files=files)
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.report and result.report.failed > 0:
            sys.exit(1)
        return

    if not quiet:
        click.secho(f"✓ Found {len(files)} .{config.source_extension} files in source directory", fg="green")
        if config.dry_run:
            click.secho("  [dry-run] no files will be written", fg="yellow")
        click.echo()

    with click.progressbar(length=len(files), label="Converting") as bar:
        def _advance(receipt: FileReceipt) -> None:
            bar.update(1)

        result = run_conversion(config, files=files, on_progress=_advance)

    report = result.report
    assert report is not None

    click.echo()
    for receipt in report.receipts:
        if receipt.ok:
            if ctx.obj.get("verbose"):
                click.secho("   ✓ ", fg="green", nl=False)
                click.echo(f"Processed: {receipt.name}")
        elif receipt.failed:
            click.secho("   ✗ ", fg="red", nl=False)
            click.echo(f"Failed to process file {receipt.name}: {receipt.error}")
        elif not quiet:
            click.secho("   ⊘ ", fg="yellow", nl=False)
            click.echo(f"{receipt.name} → {receipt.destination}")

    click.echo()
    status_color = {"ok": "green", "partial": "yellow", "failed": "red"}.get(
        report.status, "white"
    )
    verb = "Planned" if config.dry_run else "Converted"
    done = report.skipped if config.dry_run else report.succeeded
    click.secho(
        f"   {verb} {done}/{report.total} files",
        fg=status_color,
        bold=True,
    )
    if not config.dry_run:
        click.echo(f"   Output: {config.dest}")

    if report.failed > 0:
        click.secho(f"   {report.failed} file(s) failed", fg="red")
        click.echo()
        sys.exit(1)

    click.echo()
