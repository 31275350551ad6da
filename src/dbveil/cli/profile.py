"""The `profile` command group: manage local protection engine profiles."""

from __future__ import annotations

import click

from dbveil.cli._shared import fail, parse_pairs
from dbveil.engine import create_profile, load_profile
from dbveil.engine.profile import resolve_location
from dbveil.errors import EngineError


@click.group()
def profile() -> None:
    """Manage engine profiles (default: $DBVEIL_PROFILE or ~/.dbveil/profile.json)."""


@profile.command("init")
@click.argument("path", required=False)
@click.option(
    "--deny",
    "deny",
    multiple=True,
    help="Attribute value this profile may not use, as name=value. Repeatable.",
)
@click.option("--force", is_flag=True, help="Overwrite an existing profile.")
def profile_init(path: str | None, deny: tuple[str, ...], force: bool) -> None:
    """Create a profile with a fresh random secret."""
    denied = parse_pairs(deny, option="'--deny'")
    try:
        written = create_profile(path, deny=denied, overwrite=force)
    except EngineError as e:
        fail(str(e))
    click.echo(f"Profile written to {written} (mode 600)")
    click.echo("Values protected with this profile cannot be read without it.")


@profile.command("show")
@click.argument("path", required=False)
def profile_show(path: str | None) -> None:
    """Show profile metadata (never the secret)."""
    try:
        loaded = load_profile(path)
    except EngineError as e:
        fail(str(e))
    click.echo(f"profile: {resolve_location(path)}")
    click.echo(f"  id: {loaded.profile_id}")
    click.echo(f"  created: {loaded.created}")
    if loaded.deny:
        for name, values in loaded.deny.items():
            click.echo(f"  deny: {name}={', '.join(values)}")
    else:
        click.echo("  deny: (none)")
