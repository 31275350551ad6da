"""Stable, searchable code registry for policy document checks.

Ranges:
- P0001      — General (document unreadable)
- P01xx      — Document schema
- P02xx      — Statement / placeholder consistency
- P03xx      — Column attributes
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DiagnosticCode:
    value: int

    def __str__(self) -> str:
        return f"P{self.value:04d}"


# General
CONFIG_UNREADABLE = DiagnosticCode(1)

# Document schema (P01xx)
CONFIG_FORMAT = DiagnosticCode(101)
NAMESPACE_MISSING = DiagnosticCode(102)
COLUMNS_MISSING = DiagnosticCode(103)

# Statement / placeholder consistency (P02xx)
SQL_UNTOKENIZABLE = DiagnosticCode(201)
ORDINAL_OUT_OF_RANGE = DiagnosticCode(202)
NO_PLACEHOLDERS = DiagnosticCode(203)
WHITESPACE_SENSITIVE = DiagnosticCode(204)

# Column attributes (P03xx)
EMPTY_ATTRIBUTES = DiagnosticCode(301)
