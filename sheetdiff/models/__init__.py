"""Domain models for the spreadsheet diff engine.

Tables come in from the reader, alignments and diff records come out of the
core services, and summaries/statistics feed the browse list and exporters.
"""

from .alignment import ColumnAlignment, column_letter
from .column_summary import ColumnDiffSummary, GlobalStatistics, Severity
from .diff_record import DiffRecord, DiffStatus
from .error_record import ErrorRecord
from .session import CategoryFilter, ComparisonSession, FilterSettings
from .table import ABSENT, Cell, CellKind, Table, TableError

__all__ = [
    # Tabular model
    "ABSENT",
    "Cell",
    "CellKind",
    "Table",
    "TableError",
    # Comparison results
    "ColumnAlignment",
    "column_letter",
    "DiffRecord",
    "DiffStatus",
    "ColumnDiffSummary",
    "GlobalStatistics",
    "Severity",
    # Session
    "CategoryFilter",
    "ComparisonSession",
    "FilterSettings",
    # Errors
    "ErrorRecord",
]
