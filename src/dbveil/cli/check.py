"""The `check` command: validate a policy document without a database."""

from __future__ import annotations

from pathlib import Path

import click

from dbveil.cli._output import format_check
from dbveil.policy import check_config


@click.command()
@click.argument("config", type=click.Path(path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"]),
    default="text",
    help="Output format.",
)
def check(config: Path, output_format: str) -> None:
    """Check a policy document for schema errors and placeholder mismatches."""
    result = check_config(config)
    output = format_check(result, output_format=output_format)
    if output:
        click.echo(output)
    if not result.ok:
        raise SystemExit(1)
