from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""DiffRecord: classified outcome of one (column, row) cell pair."""

__all__ = [
    "DiffStatus",
    "DiffRecord",
]


class DiffStatus(Enum):
    """Classification of a normalized cell pair.

    - SAME: values equal
    - ADDED: A empty, B non-empty
    - REMOVED: A non-empty, B empty
    - CHANGED: both non-empty and different
    """
    SAME = "same"
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"

    @property
    def is_difference(self) -> bool:
        return self is not DiffStatus.SAME


@dataclass(frozen=True)
class DiffRecord:
    row_index: int  # zero-based, shared by both tables
    value_a: str  # normalized (trimmed, "" when missing)
    value_b: str
    status: DiffStatus

    @property
    def row_number(self) -> int:
        """1-based row number used in exports."""
        return self.row_index + 1
