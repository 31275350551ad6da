"""Diagnostic system: types, codes and rendering for policy checks."""

from dbveil.diagnostics import codes
from dbveil.diagnostics.codes import DiagnosticCode
from dbveil.diagnostics.types import CheckResult, Diagnostic, Level

__all__ = [
    "CheckResult",
    "Diagnostic",
    "DiagnosticCode",
    "Level",
    "codes",
]
