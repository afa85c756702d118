from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from .diff_record import DiffStatus
from .table import Table

"""Comparison session: the explicit input to the diff pipeline.

A session holds the two table snapshots and the user's view settings.
Replacing either side yields a new session; every derived result is
recomputed from scratch by ``services.comparison.compare``.
"""

__all__ = [
    "CategoryFilter",
    "FilterSettings",
    "ComparisonSession",
]


class CategoryFilter(Enum):
    ALL = "all"
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"

    @property
    def status(self) -> DiffStatus | None:
        """Matching DiffStatus, or None for ALL."""
        if self is CategoryFilter.ALL:
            return None
        return DiffStatus(self.value)


@dataclass(frozen=True)
class FilterSettings:
    ignored_columns: frozenset[str] = frozenset()
    category: CategoryFilter = CategoryFilter.ALL
    min_difference_percentage: float = 0.0  # 0-100
    hide_identical: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.min_difference_percentage <= 100:
            raise ValueError(
                f"min_difference_percentage must be within 0-100: {self.min_difference_percentage}"
            )
        # accept any iterable of names
        if not isinstance(self.ignored_columns, frozenset):
            object.__setattr__(self, "ignored_columns", frozenset(self.ignored_columns))


@dataclass(frozen=True)
class ComparisonSession:
    """Two optional table snapshots plus filter settings.

    A missing side (``None``) means no source was supplied yet.
    """
    table_a: Table | None = None
    table_b: Table | None = None
    filters: FilterSettings = field(default_factory=FilterSettings)

    @property
    def is_ready(self) -> bool:
        """Both sides present and non-empty."""
        return (
            self.table_a is not None
            and self.table_b is not None
            and not self.table_a.is_empty
            and not self.table_b.is_empty
        )

    def with_table_a(self, table: Table | None) -> ComparisonSession:
        return replace(self, table_a=table)

    def with_table_b(self, table: Table | None) -> ComparisonSession:
        return replace(self, table_b=table)

    def with_filters(self, filters: FilterSettings) -> ComparisonSession:
        return replace(self, filters=filters)
