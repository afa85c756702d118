from __future__ import annotations

from collections.abc import Sequence

from ..models.column_summary import ColumnDiffSummary, GlobalStatistics, Severity
from ..models.diff_record import DiffStatus

"""Diff aggregator: ranking and suite-wide statistics.

All functions are pure reductions over ColumnDiffSummary sequences.
"""

__all__ = [
    "DEFAULT_TOP_N",
    "rank_columns",
    "compute_statistics",
    "severity_for",
]

DEFAULT_TOP_N = 5


def rank_columns(summaries: Sequence[ColumnDiffSummary]) -> list[ColumnDiffSummary]:
    """Columns by diff count descending; ties keep the input (union) order."""
    # sorted() is stable
    return sorted(summaries, key=lambda s: -s.diff_count)


def compute_statistics(
    summaries: Sequence[ColumnDiffSummary], top_n: int = DEFAULT_TOP_N
) -> GlobalStatistics:
    distribution = {
        DiffStatus.ADDED: 0,
        DiffStatus.REMOVED: 0,
        DiffStatus.CHANGED: 0,
    }
    affected_rows: set[int] = set()
    total_changes = 0
    columns_affected = 0

    for summary in summaries:
        count = 0
        for record in summary.differences:
            if not record.status.is_difference:
                continue
            count += 1
            distribution[record.status] += 1
            affected_rows.add(record.row_index)
        total_changes += count
        if count > 0:
            columns_affected += 1

    # columns without differences never count as "changed"
    ranked = [s for s in rank_columns(summaries) if s.diff_count > 0]
    most_changed = tuple((s.column, s.diff_count) for s in ranked[:top_n])
    return GlobalStatistics(
        total_changes=total_changes,
        columns_affected=columns_affected,
        rows_affected=len(affected_rows),
        change_distribution=distribution,
        most_changed_columns=most_changed,
    )


def severity_for(diff_count: int, total_rows: int) -> Severity:
    """Band a column by the share of differing rows."""
    if diff_count == 0 or total_rows <= 0:
        return Severity.IDENTICAL
    percentage = diff_count / total_rows * 100
    if percentage <= 10:
        return Severity.LOW
    if percentage <= 30:
        return Severity.MODERATE
    if percentage <= 60:
        return Severity.HIGH
    return Severity.CRITICAL
