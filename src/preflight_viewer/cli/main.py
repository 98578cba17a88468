"""CLI entry point for preflight-viewer.

Invoked as::

    preflight-viewer [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m preflight_viewer.cli.main

Available commands
------------------
* ``validate`` — check a results file and report its schema variant
* ``show``     — render derived metrics for one or more dashboard sections
* ``sample``   — render the built-in legacy or new sample document
* ``export``   — write an accepted results file back as pretty-printed JSON
* ``version``  — show detailed version information
"""
from __future__ import annotations

import logging
import sys
from typing import NoReturn

import click
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from preflight_viewer import __version__
from preflight_viewer.config import ViewerConfig, load_config
from preflight_viewer.errors import DocumentImportError
from preflight_viewer.importer import DocumentImporter, ImportedDocument
from preflight_viewer.metrics.deriver import Section
from preflight_viewer.metrics.statistics import DerivationGap
from preflight_viewer.report import SectionReporter
from preflight_viewer.validation.validator import ValidationPolicy

console = Console()
logger = logging.getLogger(__name__)

_SECTION_CHOICE = click.Choice([section.value for section in Section], case_sensitive=False)
_FORMAT_CHOICE = click.Choice(["text", "json"], case_sensitive=False)


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="preflight-viewer")
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Set the log level.",
    show_default=True,
)
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="YAML file with validation policy and metric thresholds.",
)
@click.option(
    "--policy",
    default=None,
    type=click.Choice([policy.value for policy in ValidationPolicy], case_sensitive=False),
    help="Schema-variant detection policy (overrides the config file).",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str, config_path: str | None, policy: str | None) -> None:
    """Inspect WebRTC pre-flight test-results files from the command line."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s — %(message)s",
    )

    config = ViewerConfig()
    if config_path:
        try:
            config = load_config(config_path)
        except (ValueError, ValidationError, yaml.YAMLError) as exc:
            console.print(f"[red]Invalid config file:[/red] {exc}")
            raise SystemExit(1) from exc
    if policy:
        config = config.model_copy(update={"policy": ValidationPolicy(policy.lower())})
    ctx.obj = config


def _importer(config: ViewerConfig) -> DocumentImporter:
    return DocumentImporter(validator=config.make_validator())


def _fail(exc: DocumentImportError) -> NoReturn:
    console.print(f"[red]{exc.user_message}[/red]")
    console.print(f"  {exc.source_name}: {exc.detail}")
    raise SystemExit(1) from exc


def _render(
    imported: ImportedDocument,
    config: ViewerConfig,
    sections: tuple[str, ...],
    output_format: str,
) -> None:
    deriver = config.make_deriver()
    reporter = SectionReporter()
    selected = [Section(name.lower()) for name in sections] or list(Section)
    results = {section: deriver.derive(imported.document, section) for section in selected}

    if output_format.lower() == "json":
        # Plain echo keeps the JSON free of console wrapping and markup.
        click.echo(reporter.format_json(results))
        return

    console.print(
        f"[bold]{imported.source_name}[/bold] — {imported.variant.value} format"
    )
    for warning in imported.validation.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")
    for section, metrics in results.items():
        if isinstance(metrics, DerivationGap):
            console.print(f"\n[bold]{section.value.title()}[/bold]: {metrics} ({metrics.reason})")
            continue
        table = Table(title=section.value.title(), show_header=True)
        table.add_column("Metric", style="bold")
        table.add_column("Value")
        for label, value in reporter.rows(metrics):
            table.add_row(label, value)
        console.print(table)


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    console.print(f"[bold]preflight-viewer[/bold] v{__version__}")
    console.print(f"Python {sys.version}")


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@click.argument("file_path", type=click.Path(dir_okay=False))
@click.pass_obj
def validate_command(config: ViewerConfig, file_path: str) -> None:
    """Check FILE_PATH and report which result format it uses.

    Exits with status 1 when the file cannot be imported.
    """
    try:
        imported = _importer(config).load_file(file_path)
    except DocumentImportError as exc:
        _fail(exc)

    result = imported.validation
    console.print(
        f"[bold green]Valid[/bold green] {imported.source_name}: "
        f"{imported.variant.value} format (policy={config.policy.value})"
    )
    table = Table(title="Detected Sections", show_header=True)
    table.add_column("Section", style="bold")
    table.add_column("Present")
    if result.sections is not None:
        for name, present in (
            ("bitrateTestResults", result.sections.bitrate_test_results),
            ("preflightTestReport", result.sections.preflight_test_report),
            ("qualityResults", result.sections.quality_results),
            ("connectivityResults", result.sections.connectivity_results),
        ):
            table.add_row(name, "yes" if present else "no")
    console.print(table)
    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


@cli.command(name="show")
@click.argument("file_path", type=click.Path(dir_okay=False))
@click.option(
    "--section",
    "sections",
    multiple=True,
    type=_SECTION_CHOICE,
    help="Section to render; repeat for several.  Defaults to all sections.",
)
@click.option(
    "--format",
    "output_format",
    default="text",
    type=_FORMAT_CHOICE,
    show_default=True,
    help="Output format.",
)
@click.pass_obj
def show_command(
    config: ViewerConfig,
    file_path: str,
    sections: tuple[str, ...],
    output_format: str,
) -> None:
    """Render derived metrics for FILE_PATH.

    Example::

        preflight-viewer show results.json --section audio --section network
    """
    try:
        imported = _importer(config).load_file(file_path)
    except DocumentImportError as exc:
        _fail(exc)
    _render(imported, config, sections, output_format)


# ---------------------------------------------------------------------------
# sample
# ---------------------------------------------------------------------------


@cli.command(name="sample")
@click.option(
    "--variant",
    default="legacy",
    type=click.Choice(["legacy", "new"], case_sensitive=False),
    show_default=True,
    help="Which built-in sample document to load.",
)
@click.option(
    "--section",
    "sections",
    multiple=True,
    type=_SECTION_CHOICE,
    help="Section to render; repeat for several.  Defaults to all sections.",
)
@click.option(
    "--format",
    "output_format",
    default="text",
    type=_FORMAT_CHOICE,
    show_default=True,
    help="Output format.",
)
@click.pass_obj
def sample_command(
    config: ViewerConfig,
    variant: str,
    sections: tuple[str, ...],
    output_format: str,
) -> None:
    """Render the built-in sample document without importing a file."""
    try:
        imported = _importer(config).load_sample(variant.lower())
    except DocumentImportError as exc:
        _fail(exc)
    _render(imported, config, sections, output_format)


# ---------------------------------------------------------------------------
# export
# ---------------------------------------------------------------------------


@cli.command(name="export")
@click.argument("file_path", type=click.Path(dir_okay=False))
@click.option(
    "--output",
    default=None,
    type=click.Path(dir_okay=False),
    help="Destination path.  Defaults to test-results-YYYY-MM-DD.json.",
)
@click.pass_obj
def export_command(config: ViewerConfig, file_path: str, output: str | None) -> None:
    """Re-export FILE_PATH as pretty-printed UTF-8 JSON."""
    importer = _importer(config)
    try:
        imported = importer.load_file(file_path)
    except DocumentImportError as exc:
        _fail(exc)

    try:
        path = importer.export(imported, output=output)
    except OSError as exc:
        console.print(f"[red]Error writing export:[/red] {exc}")
        raise SystemExit(1) from exc
    console.print(f"[bold green]Exported to:[/bold green] {path}")


if __name__ == "__main__":
    cli()
