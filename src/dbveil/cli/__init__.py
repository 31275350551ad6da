"""CLI entry point for the `dbveil` command."""

from __future__ import annotations

import click

from dbveil.cli.check import check
from dbveil.cli.connect import connect
from dbveil.cli.envelope import protect, reveal
from dbveil.cli.exec import exec_cmd
from dbveil.cli.profile import profile


@click.group()
@click.version_option(package_name="dbveil")
def main() -> None:
    """dbveil: policy-driven protection of SQL parameters."""


main.add_command(connect)
main.add_command(profile)
main.add_command(check)
main.add_command(exec_cmd)
main.add_command(protect)
main.add_command(reveal)
