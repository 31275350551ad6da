"""The `protect` and `reveal` commands: single-value engine operations."""

from __future__ import annotations

import json

import click

from dbveil.cli._shared import fail, parse_pairs
from dbveil.engine import load_profile
from dbveil.errors import EngineError
from dbveil.policy import ColumnProtectionPolicy


@click.command()
@click.argument("value")
@click.option("--profile", "profile_path", default=None, help="Engine profile path.")
@click.option(
    "--attr",
    "attrs",
    multiple=True,
    help="Key attribute as name=value. Repeatable.",
)
def protect(value: str, profile_path: str | None, attrs: tuple[str, ...]) -> None:
    """Protect VALUE under the given key attributes and print the envelope."""
    policy = ColumnProtectionPolicy.from_mapping(parse_pairs(attrs, option="'--attr'"))
    try:
        engine = load_profile(profile_path).engine()
        click.echo(engine.protect(value, policy))
    except EngineError as e:
        fail(str(e))


@click.command()
@click.argument("envelope")
@click.option("--profile", "profile_path", default=None, help="Engine profile path.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"]),
    default="text",
    help="Output format.",
)
def reveal(envelope: str, profile_path: str | None, output_format: str) -> None:
    """Unprotect ENVELOPE and print the plaintext."""
    try:
        engine = load_profile(profile_path).engine()
        plaintext, policy = engine.unprotect(envelope)
    except EngineError as e:
        fail(str(e))

    if output_format == "json":
        click.echo(json.dumps({"value": plaintext, "attributes": policy.to_dict()}, indent=2))
        return
    click.echo(plaintext)
    for name, values in policy.attributes:
        click.echo(f"  {name}: {', '.join(values)}", err=True)
