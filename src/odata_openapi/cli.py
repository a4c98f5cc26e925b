"""Command line interface for odata-openapi."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from odata_openapi import __version__
from odata_openapi.capabilities.catalog import get_restriction
from odata_openapi.capabilities.resolver import resolve_annotation_with_scope
from odata_openapi.capabilities.terms import CapabilitiesTerm
from odata_openapi.edm.loader import load_model
from odata_openapi.edm.model import EdmModel, NavigationSource
from odata_openapi.errors import ODataOpenAPIError
from odata_openapi.generator import ODataOpenAPIGenerator
from odata_openapi.settings import GeneratorSettings, load_settings

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _fail(error: ODataOpenAPIError) -> None:
    err_console.print(f"[red]Error:[/red] {error}")
    raise SystemExit(1)


def _yes_no(value: bool | None) -> str:
    if value is None:
        return "[dim]-[/dim]"
    return "[green]yes[/green]" if value else "[red]no[/red]"


@click.group()
@click.version_option(version=__version__, prog_name="odata-openapi")
def cli() -> None:
    """Generate OpenAPI documents from OData models."""


@cli.command()
@click.argument("model_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Output file (default: stdout)")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["yaml", "json"]),
    default="yaml",
    show_default=True,
    help="Document format",
)
@click.option("--config", "-c", "config_path", type=click.Path(dir_okay=False, path_type=Path), help="Settings file (YAML)")
@click.option("--no-operation-id", is_flag=True, help="Omit operationId on generated operations")
@click.option("--key-as-segment", is_flag=True, help="Address entities as /Set/{key} instead of /Set({key})")
@click.option("--pagination", is_flag=True, help="Mark collection reads as pageable")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def generate(
    model_file: Path,
    output: Path | None,
    output_format: str,
    config_path: Path | None,
    no_operation_id: bool,
    key_as_segment: bool,
    pagination: bool,
    verbose: bool,
) -> None:
    """Generate an OpenAPI document for MODEL_FILE.

    Examples:
        odata-openapi generate service.yaml -o openapi.yaml
        odata-openapi generate service.yaml --format json --pagination
    """
    _configure_logging(verbose)

    try:
        settings = load_settings(
            config_path,
            enable_operation_id=False if no_operation_id else None,
            enable_key_as_segment=True if key_as_segment else None,
            enable_pagination=True if pagination else None,
        )
        model = load_model(model_file)
    except ODataOpenAPIError as e:
        _fail(e)

    generator = ODataOpenAPIGenerator(model, settings)
    text = generator.to_json() if output_format == "json" else generator.to_yaml()

    for failure in generator.failures:
        err_console.print(
            f"[yellow]Skipped[/yellow] {failure.operation_type.value.upper()} {failure.path}: {failure.error.message}"
        )

    if output is None:
        click.echo(text)
        return

    output.write_text(text, encoding="utf-8")
    console.print(f"[green]Wrote[/green] {output}")


def _source_row(model: EdmModel, source: NavigationSource, kind: str) -> list[str]:
    read = get_restriction(model, source, CapabilitiesTerm.READ_RESTRICTIONS)
    insert = get_restriction(model, source, CapabilitiesTerm.INSERT_RESTRICTIONS)
    update = get_restriction(model, source, CapabilitiesTerm.UPDATE_RESTRICTIONS)
    delete = get_restriction(model, source, CapabilitiesTerm.DELETE_RESTRICTIONS)
    search = get_restriction(model, source, CapabilitiesTerm.SEARCH_RESTRICTIONS)
    filter_restrictions = get_restriction(model, source, CapabilitiesTerm.FILTER_RESTRICTIONS)
    top = get_restriction(model, source, CapabilitiesTerm.TOP_SUPPORTED)
    skip = get_restriction(model, source, CapabilitiesTerm.SKIP_SUPPORTED)

    _, scope = resolve_annotation_with_scope(model, source, CapabilitiesTerm.READ_RESTRICTIONS)

    return [
        source.name,
        kind,
        _yes_no(read.readable),
        _yes_no(insert.insertable) if kind == "entity set" else _yes_no(None),
        _yes_no(update.updatable),
        _yes_no(delete.deletable) if kind == "entity set" else _yes_no(None),
        _yes_no(search.searchable),
        _yes_no(filter_restrictions.filterable),
        _yes_no(top.supported),
        _yes_no(skip.supported),
        scope.value if scope is not None else "default",
    ]


@cli.command()
@click.argument("model_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--config", "-c", "config_path", type=click.Path(dir_okay=False, path_type=Path), help="Settings file (YAML)")
def inspect(model_file: Path, config_path: Path | None) -> None:
    """Show the resolved capabilities of every navigation source."""
    try:
        settings: GeneratorSettings = load_settings(config_path)
        model = load_model(model_file)
    except ODataOpenAPIError as e:
        _fail(e)

    container = model.container
    table = Table(title=f"{container.full_name} ({settings.service_root})")
    table.add_column("Source", style="bold")
    table.add_column("Kind")
    for header in ("Read", "Insert", "Update", "Delete", "Search", "Filter", "Top", "Skip"):
        table.add_column(header, justify="center")
    table.add_column("Read from")

    for entity_set in container.entity_sets:
        table.add_row(*_source_row(model, entity_set, "entity set"))
    for singleton in container.singletons:
        table.add_row(*_source_row(model, singleton, "singleton"))

    console.print(table)


def main() -> None:
    """Main entry point for the odata-openapi CLI."""
    cli()


__all__ = ["cli", "main"]
