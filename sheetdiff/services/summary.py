from __future__ import annotations

from datetime import UTC, datetime

from ..models.column_summary import GlobalStatistics
from ..models.diff_record import DiffStatus

"""Summary rendering: the plain-text report and the SUMMARY log line.

Report template (``comparison_summary.txt``)::

    Spreadsheet Comparison Summary
    Generated: 2024-01-01T10:00:00Z

    Total changes: 9
    Columns affected: 2
    Rows affected: 4

    Change distribution:
      Added: 2
      Removed: 1
      Changed: 6

    Most changed columns:
      1. name: 6
      2. city: 3
"""

__all__ = [
    "REPORT_TITLE",
    "render_summary_report",
    "render_summary_line",
]

REPORT_TITLE = "Spreadsheet Comparison Summary"

_DISTRIBUTION_LABELS = (
    (DiffStatus.ADDED, "Added"),
    (DiffStatus.REMOVED, "Removed"),
    (DiffStatus.CHANGED, "Changed"),
)


def _format_timestamp(generated_at: datetime | None) -> str:
    ts = generated_at or datetime.now(UTC)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def render_summary_report(stats: GlobalStatistics, generated_at: datetime | None = None) -> str:
    """Render the fixed-template text report (ends with a newline)."""
    lines = [
        REPORT_TITLE,
        f"Generated: {_format_timestamp(generated_at)}",
        "",
        f"Total changes: {stats.total_changes}",
        f"Columns affected: {stats.columns_affected}",
        f"Rows affected: {stats.rows_affected}",
        "",
        "Change distribution:",
    ]
    for status, label in _DISTRIBUTION_LABELS:
        lines.append(f"  {label}: {stats.change_distribution.get(status, 0)}")
    lines.append("")
    lines.append("Most changed columns:")
    if stats.most_changed_columns:
        for rank, (column, count) in enumerate(stats.most_changed_columns, start=1):
            lines.append(f"  {rank}. {column}: {count}")
    else:
        lines.append("  (none)")
    return "\n".join(lines) + "\n"


def render_summary_line(total_columns: int, stats: GlobalStatistics) -> str:
    """One-line SUMMARY for the CLI log.

    >>> render_summary_line(0, GlobalStatistics())
    'SUMMARY columns=0 changes=0 columns_affected=0 rows_affected=0 added=0 removed=0 changed=0'
    """
    dist = stats.change_distribution
    return (
        f"SUMMARY columns={total_columns} "
        f"changes={stats.total_changes} "
        f"columns_affected={stats.columns_affected} "
        f"rows_affected={stats.rows_affected} "
        f"added={dist.get(DiffStatus.ADDED, 0)} "
        f"removed={dist.get(DiffStatus.REMOVED, 0)} "
        f"changed={dist.get(DiffStatus.CHANGED, 0)}"
    )
