"""The `exec` command: run one parameterized statement through the protection layer."""

from __future__ import annotations

import time

import click

from dbveil.adapters import AdapterError, ConnectionConfig, get_adapter
from dbveil.auditlog import cleanup_old_logs, log_execution
from dbveil.cli._output import ExecutionOutput, format_execution
from dbveil.cli._shared import collect_params, fail, parse_db
from dbveil.driver import connect
from dbveil.errors import DbveilError


def _handled_errors(config: ConnectionConfig) -> tuple[type[Exception], ...]:
    """dbveil errors plus the driver's DB-API base error."""
    try:
        return (DbveilError, get_adapter(config.driver)().error_class())
    except AdapterError:
        # Missing driver; connect() raises an AdapterError of its own.
        return (DbveilError,)


@click.command("exec")
@click.argument("sql")
@click.option("--db", "db", required=True, help="Named connection or 'type:key=val,...'.")
@click.option("--policy", default=None, help="Policy JSON path (default: connection's policy).")
@click.option("--profile", default=None, help="Engine profile path (default: connection's profile).")
@click.option("-p", "--param", "params", multiple=True, help="Positional string value. Repeatable.")
@click.option("--params-json", default=None, help="Positional values as a JSON array.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"]),
    default="text",
    help="Output format.",
)
@click.option("--no-log", is_flag=True, help="Do not write the audit log entry.")
def exec_cmd(
    sql: str,
    db: str,
    policy: str | None,
    profile: str | None,
    params: tuple[str, ...],
    params_json: str | None,
    output_format: str,
    no_log: bool,
) -> None:
    """Prepare SQL, bind values with ? placeholders, protect, execute, reveal rows."""
    config = parse_db(db)
    values = collect_params(params, params_json)

    protected: list[int] = []
    parameter_count = 0
    t0 = time.monotonic()
    try:
        conn = connect(config, policy=policy, profile=profile)
        try:
            with conn.prepare(sql) as statement:
                parameter_count = statement.parameters.count
                statement.bind(*values)
                cursor = statement.execute()
                protected = statement.last_protected
                if cursor.description:
                    columns = [desc[0] for desc in cursor.description]
                    rows = [dict(zip(columns, row, strict=True)) for row in cursor.fetchall()]
                    row_count = len(rows)
                else:
                    columns, rows = [], []
                    row_count = statement.native.update_count()
            conn.commit()
        finally:
            conn.close()
    except _handled_errors(config) as e:
        if not no_log:
            log_execution(
                sql=sql,
                db=config.name,
                parameter_count=parameter_count,
                protected=protected,
                error=str(e),
            )
        fail(str(e))
    duration_ms = (time.monotonic() - t0) * 1000

    result = ExecutionOutput(
        columns=columns,
        rows=rows,
        row_count=row_count,
        protected=protected,
        revealed=cursor.revealed,
        duration_ms=duration_ms,
    )
    click.echo(format_execution(result, output_format=output_format))

    if not no_log:
        log_execution(
            sql=sql,
            db=config.name,
            parameter_count=parameter_count,
            protected=protected,
            row_count=row_count,
            revealed=cursor.revealed,
            duration_ms=duration_ms,
        )
        cleanup_old_logs()
