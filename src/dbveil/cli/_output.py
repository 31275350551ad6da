"""Shared output formatting for CLI commands."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from dbveil.diagnostics.render import render_json, render_text
from dbveil.diagnostics.types import CheckResult


@dataclass
class ExecutionOutput:
    """What `dbveil exec` reports after running one statement."""

    columns: list[str]
    rows: list[dict[str, object]]
    row_count: int
    protected: list[int] = field(default_factory=list)
    revealed: int = 0
    duration_ms: float | None = None


def format_check(result: CheckResult, *, output_format: str = "text") -> str:
    if output_format == "json":
        return json.dumps(render_json(result), indent=2)
    return render_text(result)


def format_execution(result: ExecutionOutput, *, output_format: str = "text") -> str:
    if output_format == "json":
        data = {
            "columns": result.columns,
            "rows": result.rows,
            "row_count": result.row_count,
            "protected": result.protected,
            "revealed": result.revealed,
            "duration_ms": result.duration_ms,
        }
        return json.dumps(data, indent=2, default=str)

    # Text format: simple tabular output.
    lines: list[str] = []
    if result.columns:
        lines.append(" | ".join(result.columns))
        lines.append("-+-".join("-" * max(len(c), 5) for c in result.columns))
        for row in result.rows:
            lines.append(" | ".join(str(row.get(c, "")) for c in result.columns))

    duration = f", {result.duration_ms:.0f}ms" if result.duration_ms is not None else ""
    lines.append(f"\n({result.row_count} rows{duration})")
    if result.protected:
        lines.append(f"protected ordinals: {', '.join(str(o) for o in result.protected)}")
    return "\n".join(lines)
