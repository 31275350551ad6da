"""Diagnostic values produced by the policy document checker.

Every check yields Diagnostic values; the CheckResult collects them for one
document and decides whether the document is usable.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from dbveil.diagnostics.codes import DiagnosticCode


class Level(enum.IntEnum):
    INFO = 0
    WARNING = 1
    ERROR = 2


@dataclass
class Diagnostic:
    level: Level
    code: DiagnosticCode
    message: str
    statement: str | None = None
    ordinal: int | None = None
    notes: list[str] = field(default_factory=list)

    # -- Builder classmethods ---------------------------------------------------

    @classmethod
    def error(cls, code: DiagnosticCode, message: str) -> Diagnostic:
        return cls(level=Level.ERROR, code=code, message=message)

    @classmethod
    def warning(cls, code: DiagnosticCode, message: str) -> Diagnostic:
        return cls(level=Level.WARNING, code=code, message=message)

    @classmethod
    def info(cls, code: DiagnosticCode, message: str) -> Diagnostic:
        return cls(level=Level.INFO, code=code, message=message)

    # -- Builder chain methods --------------------------------------------------

    def at(self, statement: str, ordinal: int | None = None) -> Diagnostic:
        self.statement = statement
        self.ordinal = ordinal
        return self

    def note(self, note: str) -> Diagnostic:
        self.notes.append(note)
        return self

    # -- Query methods ----------------------------------------------------------

    @property
    def is_blocking(self) -> bool:
        return self.level == Level.ERROR


@dataclass
class CheckResult:
    source: str
    diagnostics: list[Diagnostic] = field(default_factory=list)
    statements: int = 0
    protected_columns: int = 0

    @property
    def ok(self) -> bool:
        return not any(d.is_blocking for d in self.diagnostics)

    @property
    def max_level(self) -> Level | None:
        if not self.diagnostics:
            return None
        return max(d.level for d in self.diagnostics)

    def by_level(self, level: Level) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.level == level]
