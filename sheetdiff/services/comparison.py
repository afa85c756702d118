from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from ..models.alignment import ColumnAlignment
from ..models.column_summary import ColumnDiffSummary, GlobalStatistics
from ..models.session import ComparisonSession
from .aggregator import DEFAULT_TOP_N, compute_statistics
from .aligner import align_columns
from .classifier import summarize_column
from .filters import apply_filters, browse_columns

"""Comparison pipeline: session -> aligned, classified, aggregated results.

Each call recomputes everything from the two table snapshots; there is no
incremental path. Two independent sessions share no state.
"""

__all__ = [
    "ComparisonResult",
    "compare",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComparisonResult:
    """Everything derived from one ComparisonSession.

    ``unfiltered_statistics`` covers every aligned column (headline
    totals); ``filtered_statistics`` covers only the ``filtered`` view.
    """
    alignments: tuple[ColumnAlignment, ...] = ()
    summaries: tuple[ColumnDiffSummary, ...] = ()  # union order
    filtered: tuple[ColumnDiffSummary, ...] = ()  # union order
    browse: tuple[ColumnDiffSummary, ...] = ()  # ranked
    unfiltered_statistics: GlobalStatistics = field(default_factory=GlobalStatistics)
    filtered_statistics: GlobalStatistics = field(default_factory=GlobalStatistics)

    @property
    def is_empty(self) -> bool:
        return not self.summaries

    def summary_for(self, column: str) -> ColumnDiffSummary | None:
        for s in self.summaries:
            if s.column == column:
                return s
        return None


def compare(
    session: ComparisonSession,
    *,
    top_n: int = DEFAULT_TOP_N,
    on_column: Callable[[str], None] | None = None,
) -> ComparisonResult:
    """Run alignment, classification, aggregation and filtering.

    Args:
        session: Table snapshots + filter settings
        top_n: Size of the most-changed column list
        on_column: Called with each column name after it is classified

    Returns:
        ComparisonResult; empty when either side is missing or has no rows
    """
    if not session.is_ready:
        logger.debug("comparison skipped: a side is missing or has no rows")
        return ComparisonResult()

    table_a, table_b = session.table_a, session.table_b
    assert table_a is not None and table_b is not None

    alignments = align_columns(table_a, table_b)
    summaries: list[ColumnDiffSummary] = []
    for alignment in alignments:
        summaries.append(summarize_column(alignment, table_a, table_b))
        if on_column is not None:
            on_column(alignment.column)

    filtered = apply_filters(summaries, session.filters)
    browse = browse_columns(summaries, session.filters)
    result = ComparisonResult(
        alignments=tuple(alignments),
        summaries=tuple(summaries),
        filtered=tuple(filtered),
        browse=tuple(browse),
        unfiltered_statistics=compute_statistics(summaries, top_n=top_n),
        filtered_statistics=compute_statistics(filtered, top_n=top_n),
    )
    logger.debug(
        f"compared columns={len(summaries)} filtered={len(filtered)} "
        f"changes={result.unfiltered_statistics.total_changes}"
    )
    return result
