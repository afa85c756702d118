from __future__ import annotations

from dataclasses import dataclass

"""Column alignment between two tables."""

__all__ = [
    "ColumnAlignment",
    "column_letter",
]


def column_letter(index: int) -> str:
    """Spreadsheet-style label for a zero-based column index.

    Bijective base-26: 0 -> "A", 25 -> "Z", 26 -> "AA", 701 -> "ZZ",
    702 -> "AAA". Negative indices yield "".

    >>> column_letter(27)
    'AB'
    """
    if index < 0:
        return ""
    return column_letter(index // 26 - 1) + chr(65 + index % 26)


@dataclass(frozen=True)
class ColumnAlignment:
    """Presence and position of one column name in each table.

    position_a is set iff in_a (same for B).
    """
    column: str
    in_a: bool
    in_b: bool
    position_a: int | None = None
    position_b: int | None = None

    def __post_init__(self) -> None:
        if self.in_a != (self.position_a is not None):
            raise ValueError(f"position_a must be set iff in_a for column {self.column!r}")
        if self.in_b != (self.position_b is not None):
            raise ValueError(f"position_b must be set iff in_b for column {self.column!r}")

    @property
    def letter_a(self) -> str | None:
        return column_letter(self.position_a) if self.position_a is not None else None

    @property
    def letter_b(self) -> str | None:
        return column_letter(self.position_b) if self.position_b is not None else None

    @property
    def in_both(self) -> bool:
        return self.in_a and self.in_b

    @property
    def only_in_a(self) -> bool:
        return self.in_a and not self.in_b

    @property
    def only_in_b(self) -> bool:
        return self.in_b and not self.in_a
