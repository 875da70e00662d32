"""CLI commands for records: enrich a record file, inspect one record."""

from __future__ import annotations

import base64
import json

import click
from rich.markup import escape
from rich.table import Table

from graph_analytics.config import RESOLUTION_ENV_VAR, ExtractorConfig, ResolutionPolicy
from graph_analytics.errors import ExtractionError, ParseError
from graph_analytics.helpers.console import console, truncate

_RESOLUTION_OPTION = click.option(
    "--resolution",
    type=click.Choice([p.value for p in ResolutionPolicy]),
    default=ResolutionPolicy.LENIENT.value,
    envvar=RESOLUTION_ENV_VAR,
    show_default=True,
    help="How to treat fields that cannot be resolved against the API schema.",
)


@click.group()
def records() -> None:
    """Record tools: enrich GraphQL analytics records, inspect one record."""


@records.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", required=True, help="Output file for GraphRecords (.jsonl)")
@_RESOLUTION_OPTION
def enrich(input_path: str, output: str, resolution: str) -> None:
    """Convert GraphQL-tagged records into enriched GraphRecords."""
    from graph_analytics.commands.enrich.builder import enrich_records
    from graph_analytics.commands.enrich.loader import load_records, write_records

    config = ExtractorConfig(resolution=ResolutionPolicy(resolution))
    console.print(f"[bold]Loading records:[/bold] {input_path}")
    try:
        loaded = load_records(input_path)
    except ParseError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1) from e

    report = enrich_records(loaded, config)
    written = write_records(report.records, output)

    table = Table(title="Enrichment")
    table.add_column("Outcome", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("Enriched", str(written))
    table.add_row("Skipped (untagged)", str(report.skipped))
    table.add_row("Failed", str(len(report.failures)))
    console.print(table)

    if report.failures:
        failure_table = Table(title="Failures")
        failure_table.add_column("Line", justify="right")
        failure_table.add_column("Stage", style="yellow")
        failure_table.add_column("Error")
        for failure in report.failures:
            failure_table.add_row(
                str(failure.index + 1), failure.stage, escape(truncate(failure.message, 100))
            )
        console.print(failure_table)

    console.print(f"[green]GraphRecords written to {output}[/green]")
    if report.failures:
        raise SystemExit(1)


@records.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--index", default=0, show_default=True, help="Zero-based record index")
@_RESOLUTION_OPTION
def inspect(input_path: str, index: int, resolution: str) -> None:
    """Enrich and show a single record."""
    from graph_analytics.commands.enrich.builder import to_graph_record
    from graph_analytics.commands.enrich.loader import load_records
    from graph_analytics.helpers.http import decode_base64, get_header, parse_raw_message

    try:
        loaded = load_records(input_path)
    except ParseError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1) from e
    if not 0 <= index < len(loaded):
        console.print(f"[red]Record {index} not found ({len(loaded)} records)[/red]")
        raise SystemExit(1)
    record = loaded[index]

    console.print(f"[bold]Record {index}[/bold]")
    console.print(f"  API: {record.api_name} ({record.api_id})")
    console.print(f"  {record.method} {record.host}{record.path} -> {record.response_code}")
    console.print(f"  Timestamp: {record.timestamp.isoformat()}")
    console.print(f"  Tags: {', '.join(record.tags) or '-'}")

    try:
        request = parse_raw_message(decode_base64(record.raw_request, "raw request"))
        content_type = get_header(request.headers, "Content-Type") or "-"
        console.print(
            f"  Request: {escape(request.start_line)} ({escape(content_type)}, {len(request.body)} bytes)"
        )
        graph = to_graph_record(record, ExtractorConfig(resolution=ResolutionPolicy(resolution)))
    except ExtractionError as e:
        console.print(f"[red]Conversion failed at stage {e.stage}: {escape(str(e))}[/red]")
        raise SystemExit(1) from e
    console.print()

    console.print(f"[bold]Operation:[/bold] {graph.operation_type}")
    if graph.variables:
        variables = base64.b64decode(graph.variables).decode("utf-8")
        console.print(f"[bold]Variables:[/bold] {escape(truncate(variables, 200))}")

    types_table = Table(title="Field usage")
    types_table.add_column("Type", style="cyan")
    types_table.add_column("Fields")
    for type_name, fields in sorted(graph.types.items()):
        types_table.add_row(type_name, ", ".join(fields))
    console.print(types_table)

    if graph.has_errors:
        errors_table = Table(title="Errors")
        errors_table.add_column("Path")
        errors_table.add_column("Message")
        for error in graph.errors:
            errors_table.add_row(escape(json.dumps(error.path)), escape(truncate(error.message, 100)))
        console.print(errors_table)
