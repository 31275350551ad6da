"""Shared helpers for CLI commands."""

from __future__ import annotations

import json

import click

from dbveil.adapters import ConnectionConfig
from dbveil.connections import parse_target
from dbveil.errors import AdapterError


def parse_db(value: str) -> ConnectionConfig:
    """Resolve --db value: named connection first, then 'type:key=val' format."""
    try:
        return parse_target(value)
    except AdapterError as e:
        raise click.BadParameter(str(e), param_hint="'--db'") from e


def parse_pairs(pairs: tuple[str, ...], *, option: str) -> dict[str, list[str]]:
    """Collect repeated name=value options into an attribute map."""
    attributes: dict[str, list[str]] = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"Expected name=value, got '{pair}'", param_hint=option)
        name, value = pair.split("=", 1)
        attributes.setdefault(name.strip(), []).append(value)
    return attributes


def collect_params(params: tuple[str, ...], params_json: str | None) -> list[object]:
    """Positional values: -p strings, or a JSON array for typed values. Not both."""
    if params and params_json:
        raise click.UsageError("Provide -p/--param or --params-json, not both.")
    if params_json is None:
        return list(params)
    try:
        values = json.loads(params_json)
    except ValueError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="'--params-json'") from e
    if not isinstance(values, list):
        raise click.BadParameter("must be a JSON array", param_hint="'--params-json'")
    return values


def fail(message: str) -> None:
    click.echo(f"error: {message}", err=True)
    raise SystemExit(1)
