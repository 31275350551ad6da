"""Policy value types: per-column key attributes and per-statement ordinal maps."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class ColumnProtectionPolicy:
    """Key attributes governing how one parameter position is protected.

    Stored as ``(name, values)`` pairs sorted by name, so two policies built
    from the same attributes in a different insertion order compare equal and
    hash alike. Value order within an attribute is kept as given.
    """

    attributes: tuple[tuple[str, tuple[str, ...]], ...] = ()

    @classmethod
    def from_mapping(cls, cattrs: Mapping[str, Iterable[str]]) -> ColumnProtectionPolicy:
        return cls(tuple(sorted((name, tuple(values)) for name, values in cattrs.items())))

    def __getitem__(self, name: str) -> tuple[str, ...]:
        for key, values in self.attributes:
            if key == name:
                return values
        raise KeyError(name)

    def __contains__(self, name: object) -> bool:
        return any(key == name for key, _ in self.attributes)

    def __iter__(self) -> Iterator[str]:
        return (key for key, _ in self.attributes)

    def __len__(self) -> int:
        return len(self.attributes)

    def get(self, name: str, default: tuple[str, ...] | None = None) -> tuple[str, ...] | None:
        try:
            return self[name]
        except KeyError:
            return default

    def to_dict(self) -> dict[str, list[str]]:
        return {name: list(values) for name, values in self.attributes}

    def canonical_json(self) -> str:
        """Deterministic JSON form, used for key derivation and envelopes."""
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))


class StatementPolicyMap:
    """Ordinal → policy map for one SQL text. Absent ordinals are never protected."""

    __slots__ = ("_columns", "_sql")

    def __init__(self, sql: str, columns: Mapping[int, ColumnProtectionPolicy] | None = None) -> None:
        self._sql = sql
        self._columns = MappingProxyType(dict(sorted((columns or {}).items())))

    @property
    def sql(self) -> str:
        return self._sql

    @property
    def columns(self) -> Mapping[int, ColumnProtectionPolicy]:
        return self._columns

    @property
    def ordinals(self) -> list[int]:
        return list(self._columns)

    def lookup(self, ordinal: int) -> ColumnProtectionPolicy | None:
        return self._columns.get(ordinal)

    def __contains__(self, ordinal: object) -> bool:
        return ordinal in self._columns

    def __len__(self) -> int:
        return len(self._columns)

    def __bool__(self) -> bool:
        return bool(self._columns)

    def __repr__(self) -> str:
        return f"StatementPolicyMap(sql={self._sql!r}, ordinals={self.ordinals})"
