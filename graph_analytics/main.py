"""CLI entry point for graph-analytics."""

from __future__ import annotations

import click
from dotenv import load_dotenv

from graph_analytics.commands.enrich.cmd import records
from graph_analytics.helpers.console import setup_logging

load_dotenv()


@click.group()
@click.version_option(version="0.1.0", prog_name="graph-analytics")
@click.option("-v", "--verbose", is_flag=True, help="Log unresolved selections and failures")
def cli(verbose: bool):
    """Enrich captured GraphQL traffic with operation, field usage and errors."""
    setup_logging(verbose)


cli.add_command(records)


if __name__ == "__main__":
    cli()
