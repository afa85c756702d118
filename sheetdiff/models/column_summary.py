from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .alignment import ColumnAlignment
from .diff_record import DiffRecord, DiffStatus

"""Per-column diff summaries and suite-wide statistics."""

__all__ = [
    "ColumnDiffSummary",
    "GlobalStatistics",
    "Severity",
]


class Severity(Enum):
    """Share of differing rows in a column, in bands.

    IDENTICAL (0 diffs), LOW (<=10%), MODERATE (<=30%), HIGH (<=60%),
    CRITICAL (>60%).
    """
    IDENTICAL = "identical"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class ColumnDiffSummary:
    """All DiffRecords for one column plus derived counts.

    ``diff_count`` always equals the number of non-SAME records in
    ``differences``; ``total_rows`` is the iteration bound
    max(len(A.rows), len(B.rows)) and is kept when the records are narrowed.
    """
    alignment: ColumnAlignment
    total_rows: int
    differences: tuple[DiffRecord, ...] = ()

    @property
    def column(self) -> str:
        return self.alignment.column

    @property
    def diff_count(self) -> int:
        return sum(1 for r in self.differences if r.status.is_difference)

    @property
    def difference_percentage(self) -> float:
        if self.total_rows == 0:
            return 0.0
        return self.diff_count / self.total_rows * 100

    @property
    def in_both(self) -> bool:
        return self.alignment.in_both

    @property
    def only_in_a(self) -> bool:
        return self.alignment.only_in_a

    @property
    def only_in_b(self) -> bool:
        return self.alignment.only_in_b

    def records_with_status(self, status: DiffStatus) -> tuple[DiffRecord, ...]:
        return tuple(r for r in self.differences if r.status is status)


@dataclass(frozen=True)
class GlobalStatistics:
    total_changes: int = 0
    columns_affected: int = 0
    rows_affected: int = 0
    change_distribution: dict[DiffStatus, int] = field(
        default_factory=lambda: {
            DiffStatus.ADDED: 0,
            DiffStatus.REMOVED: 0,
            DiffStatus.CHANGED: 0,
        }
    )
    # (column, diff_count), ranked
    most_changed_columns: tuple[tuple[str, int], ...] = ()
