"""Per-statement parameter cache: bound values held until execution."""

from __future__ import annotations

from collections.abc import Iterator

from dbveil.errors import IndexOutOfRange, InvalidArgument


class _Unset:
    """Marker for a slot that has never been bound (distinct from a bound NULL)."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNSET"


UNSET = _Unset()


class ParameterCache:
    """Fixed number of 1-based slots. Never resized after construction."""

    __slots__ = ("_slots",)

    def __init__(self, count: int) -> None:
        if isinstance(count, bool) or not isinstance(count, int):
            raise InvalidArgument(f"parameter count must be an int, got {type(count).__name__}")
        if count < 0:
            raise InvalidArgument(f"parameter count must be >= 0, got {count}")
        self._slots: list[object] = [UNSET] * count

    @property
    def count(self) -> int:
        return len(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    def _index(self, ordinal: int) -> int:
        if isinstance(ordinal, bool) or not isinstance(ordinal, int):
            raise IndexOutOfRange(f"ordinal must be an int, got {type(ordinal).__name__}")
        if not 1 <= ordinal <= len(self._slots):
            raise IndexOutOfRange(
                f"ordinal {ordinal} out of range [1, {len(self._slots)}]"
            )
        return ordinal - 1

    def set(self, ordinal: int, value: object) -> None:
        self._slots[self._index(ordinal)] = value

    def get(self, ordinal: int) -> object:
        return self._slots[self._index(ordinal)]

    def is_set(self, ordinal: int) -> bool:
        return self.get(ordinal) is not UNSET

    def clear(self) -> None:
        for i in range(len(self._slots)):
            self._slots[i] = UNSET

    def bound(self) -> Iterator[tuple[int, object]]:
        """Yield ``(ordinal, value)`` for every set slot, ascending."""
        for i, value in enumerate(self._slots):
            if value is not UNSET:
                yield i + 1, value

    def __repr__(self) -> str:
        return f"ParameterCache({self._slots!r})"
