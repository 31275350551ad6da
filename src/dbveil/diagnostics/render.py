"""Render check results for terminal (text) and machine (JSON) output."""

from __future__ import annotations

from dbveil.diagnostics.types import CheckResult, Diagnostic


def render_json(result: CheckResult) -> dict:
    """Render a CheckResult as a JSON-serializable dict."""
    return {
        "source": result.source,
        "ok": result.ok,
        "statements": result.statements,
        "protected_columns": result.protected_columns,
        "diagnostics": [_diagnostic_to_dict(d) for d in result.diagnostics],
    }


def render_text(result: CheckResult) -> str:
    """Render a CheckResult as human-readable text."""
    lines: list[str] = []
    for d in result.diagnostics:
        lines.append(f"{d.level.name.lower()}[{d.code}]: {d.message}")
        if d.statement is not None:
            where = f"  --> {d.statement!r}"
            if d.ordinal is not None:
                where += f" ordinal {d.ordinal}"
            lines.append(where)
        for note in d.notes:
            lines.append(f"  = note: {note}")

    summary = (
        f"{result.source}: {result.statements} statement(s), "
        f"{result.protected_columns} protected column(s)"
    )
    if lines:
        lines.append("")
    lines.append(summary)
    return "\n".join(lines)


def _diagnostic_to_dict(d: Diagnostic) -> dict:
    return {
        "level": d.level.name.lower(),
        "code": str(d.code),
        "message": d.message,
        "statement": d.statement,
        "ordinal": d.ordinal,
        "notes": d.notes,
    }
