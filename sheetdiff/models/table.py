from __future__ import annotations

import math
import numbers
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from types import MappingProxyType
from typing import Any

"""Tabular model consumed by the diff engine.

A Table is an immutable snapshot of one parsed source: the ordered header
and the ordered data rows. Cells are read through ``Table.cell`` which
always yields a ``Cell`` of a closed kind, so comparison never depends on
implicit stringification of arbitrary objects.
"""

__all__ = [
    "CellKind",
    "Cell",
    "ABSENT",
    "Table",
    "TableError",
]


class TableError(Exception):
    """Raised when a table is constructed from an invalid header."""


class CellKind(Enum):
    """Closed set of scalar cell kinds.

    - STRING: text value
    - NUMBER: int / float (incl. numpy scalars)
    - NULL: explicit empty cell (None, NaN)
    - ABSENT: the row or the column does not exist in the table
    """
    STRING = "string"
    NUMBER = "number"
    NULL = "null"
    ABSENT = "absent"


@dataclass(frozen=True)
class Cell:
    kind: CellKind
    value: str | int | float | None = None

    @classmethod
    def from_raw(cls, raw: Any) -> Cell:
        if raw is None:
            return NULL
        if isinstance(raw, Cell):
            return raw
        if isinstance(raw, bool):
            return cls(CellKind.STRING, "true" if raw else "false")
        if isinstance(raw, numbers.Real):
            as_float = float(raw)
            if math.isnan(as_float):
                return NULL
            if isinstance(raw, numbers.Integral):
                return cls(CellKind.NUMBER, int(raw))
            return cls(CellKind.NUMBER, as_float)
        if isinstance(raw, (datetime, date, time)):
            return cls(CellKind.STRING, raw.isoformat())
        return cls(CellKind.STRING, str(raw))

    def normalized(self) -> str:
        """Comparison string: stringified and whitespace-trimmed.

        NULL and ABSENT both normalize to the empty string.
        """
        if self.kind in (CellKind.NULL, CellKind.ABSENT) or self.value is None:
            return ""
        if self.kind is CellKind.NUMBER:
            number = self.value
            if isinstance(number, float):
                if math.isinf(number):
                    return "Infinity" if number > 0 else "-Infinity"
                if number.is_integer():
                    return str(int(number))
            return str(number).strip()
        return str(self.value).strip()


ABSENT = Cell(CellKind.ABSENT)
NULL = Cell(CellKind.NULL)


@dataclass(frozen=True)
class Table:
    """Immutable parsed source (header + rows).

    Rows may be sparse: a missing key reads as ABSENT. Rows are stored as
    read-only copies so the snapshot cannot be mutated after construction.
    """
    columns: tuple[str, ...] = ()
    rows: tuple[Mapping[str, Any], ...] = ()
    source: str | None = None  # file name or "<pasted>" for log messages
    _positions: dict[str, int] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        positions: dict[str, int] = {}
        for idx, name in enumerate(self.columns):
            if name in positions:
                raise TableError(f"duplicate column name: {name!r}")
            positions[name] = idx
        object.__setattr__(self, "_positions", positions)
        object.__setattr__(self, "columns", tuple(self.columns))
        object.__setattr__(self, "rows", tuple(MappingProxyType(dict(r)) for r in self.rows))

    @classmethod
    def from_records(
        cls,
        columns: Iterable[str],
        rows: Iterable[Mapping[str, Any]],
        source: str | None = None,
    ) -> Table:
        return cls(
            columns=tuple(columns),
            rows=tuple(rows),
            source=source,
        )

    @classmethod
    def empty(cls, source: str | None = None) -> Table:
        return cls(source=source)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def has_column(self, column: str) -> bool:
        return column in self._positions

    def position(self, column: str) -> int | None:
        return self._positions.get(column)

    def cell(self, row_index: int, column: str) -> Cell:
        if row_index < 0 or row_index >= len(self.rows):
            return ABSENT
        row = self.rows[row_index]
        if column not in row:
            return ABSENT
        return Cell.from_raw(row[column])
