from __future__ import annotations

from ..models.alignment import ColumnAlignment
from ..models.column_summary import ColumnDiffSummary
from ..models.diff_record import DiffRecord, DiffStatus
from ..models.table import Table

"""Cell classifier.

Rows are paired strictly by ordinal position: row i of A is compared with
row i of B and nothing else. An inserted or deleted row in one source
therefore shows up as CHANGED on every following row; content-based row
matching is intentionally not attempted.
"""

__all__ = [
    "classify_pair",
    "classify_column",
    "summarize_column",
]


def classify_pair(value_a: str, value_b: str) -> DiffStatus:
    """Classify two normalized values. Total over all string pairs."""
    if value_a == value_b:
        return DiffStatus.SAME
    if value_a == "":
        return DiffStatus.ADDED
    if value_b == "":
        return DiffStatus.REMOVED
    return DiffStatus.CHANGED


def classify_column(column: str, table_a: Table, table_b: Table) -> list[DiffRecord]:
    """DiffRecords for rows 0 .. max(len(A.rows), len(B.rows)) - 1."""
    bound = max(table_a.row_count, table_b.row_count)
    records: list[DiffRecord] = []
    for row_index in range(bound):
        value_a = table_a.cell(row_index, column).normalized()
        value_b = table_b.cell(row_index, column).normalized()
        records.append(
            DiffRecord(
                row_index=row_index,
                value_a=value_a,
                value_b=value_b,
                status=classify_pair(value_a, value_b),
            )
        )
    return records


def summarize_column(alignment: ColumnAlignment, table_a: Table, table_b: Table) -> ColumnDiffSummary:
    records = classify_column(alignment.column, table_a, table_b)
    return ColumnDiffSummary(
        alignment=alignment,
        total_rows=max(table_a.row_count, table_b.row_count),
        differences=tuple(records),
    )
