from __future__ import annotations

from ..models.alignment import ColumnAlignment
from ..models.table import Table

"""Column aligner: match columns of two tables by name."""

__all__ = [
    "union_columns",
    "align_columns",
]


def union_columns(table_a: Table, table_b: Table) -> list[str]:
    """A's columns in A's order, then B's columns not already seen."""
    seen: dict[str, None] = dict.fromkeys(table_a.columns)
    for name in table_b.columns:
        seen.setdefault(name, None)
    return list(seen)


def align_columns(table_a: Table, table_b: Table) -> list[ColumnAlignment]:
    """One ColumnAlignment per union column, in union order."""
    alignments: list[ColumnAlignment] = []
    for name in union_columns(table_a, table_b):
        pos_a = table_a.position(name)
        pos_b = table_b.position(name)
        alignments.append(
            ColumnAlignment(
                column=name,
                in_a=pos_a is not None,
                in_b=pos_b is not None,
                position_a=pos_a,
                position_b=pos_b,
            )
        )
    return alignments
