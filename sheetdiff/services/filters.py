from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace

from ..models.column_summary import ColumnDiffSummary
from ..models.session import CategoryFilter, FilterSettings
from .aggregator import rank_columns

"""Filter & view projection over column summaries.

Order of application:
1. ignored columns are removed
2. category filter narrows each column's records (columns left with no
   matching record are dropped)
3. minimum difference percentage, against the full row span
4. hide identical (diff count 0), view only

The category filter must run before the threshold since it changes the
diff count. The other steps commute.
"""

__all__ = [
    "drop_ignored",
    "filter_by_category",
    "filter_by_threshold",
    "hide_identical",
    "apply_filters",
    "browse_columns",
    "select_export_columns",
    "columns_with_differences",
]


def drop_ignored(
    summaries: Iterable[ColumnDiffSummary], ignored: Iterable[str]
) -> list[ColumnDiffSummary]:
    ignored_set = set(ignored)
    return [s for s in summaries if s.column not in ignored_set]


def filter_by_category(
    summaries: Iterable[ColumnDiffSummary], category: CategoryFilter
) -> list[ColumnDiffSummary]:
    status = category.status
    if status is None:
        return list(summaries)
    narrowed: list[ColumnDiffSummary] = []
    for summary in summaries:
        matching = summary.records_with_status(status)
        if not matching:
            continue
        # total_rows stays the full span for the percentage threshold
        narrowed.append(replace(summary, differences=matching))
    return narrowed


def filter_by_threshold(
    summaries: Iterable[ColumnDiffSummary], min_percentage: float
) -> list[ColumnDiffSummary]:
    if min_percentage <= 0:
        return list(summaries)
    return [s for s in summaries if s.difference_percentage >= min_percentage]


def hide_identical(summaries: Iterable[ColumnDiffSummary]) -> list[ColumnDiffSummary]:
    return [s for s in summaries if s.diff_count > 0]


def apply_filters(
    summaries: Sequence[ColumnDiffSummary], settings: FilterSettings
) -> list[ColumnDiffSummary]:
    """Narrowed view, input order preserved. Empty result is valid."""
    view = drop_ignored(summaries, settings.ignored_columns)
    view = filter_by_category(view, settings.category)
    view = filter_by_threshold(view, settings.min_difference_percentage)
    if settings.hide_identical:
        view = hide_identical(view)
    return view


def browse_columns(
    summaries: Sequence[ColumnDiffSummary], settings: FilterSettings
) -> list[ColumnDiffSummary]:
    """Interactive column list: ranked by diff count, then filtered."""
    return apply_filters(rank_columns(summaries), settings)


def select_export_columns(
    summaries: Sequence[ColumnDiffSummary], selected: Iterable[str] | None
) -> list[ColumnDiffSummary]:
    """Columns chosen for export, in union order. Nothing selected means all."""
    chosen = set(selected or ())
    if not chosen:
        return list(summaries)
    return [s for s in summaries if s.column in chosen]


def columns_with_differences(summaries: Iterable[ColumnDiffSummary]) -> list[str]:
    return [s.column for s in summaries if s.diff_count > 0]
