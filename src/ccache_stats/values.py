"""Fixed-size counter store keyed by CacheField."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from ccache_stats.fields import FIELD_DATA_ORDER, CacheField, metadata

U64_MAX = 2**64 - 1


class FieldValues:
    """One non-negative counter per CacheField, all defaulting to zero.

    Slots are stored densely by ordinal; there is never a missing entry.
    """

    __slots__ = ("_values",)

    def __init__(self, values: dict[CacheField, int] | None = None):
        self._values = [0] * len(FIELD_DATA_ORDER)
        if values:
            for field, value in values.items():
                self[field] = value

    def __getitem__(self, field: CacheField) -> int:
        return self._values[CacheField(field)]

    def __setitem__(self, field: CacheField, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Counter for {CacheField(field).name} must be an int, got {value!r}")
        if value < 0:
            raise ValueError(f"Counter for {CacheField(field).name} cannot be negative: {value}")
        self._values[CacheField(field)] = value

    def __iter__(self) -> Iterator[tuple[CacheField, int]]:
        """Iterate (field, value) pairs in data order."""
        for field in FIELD_DATA_ORDER:
            yield field, self._values[field]

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldValues):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        nonzero = {f.name: v for f, v in self if v}
        return f"FieldValues({nonzero!r})"

    def copy(self) -> FieldValues:
        clone = FieldValues()
        clone._values = list(self._values)
        return clone

    def to_dict(self) -> dict[str, Any]:
        """Convert to a {field id: value} dictionary in data order."""
        return {metadata(field).id: value for field, value in self}
