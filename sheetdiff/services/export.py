from __future__ import annotations

import io
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

import pandas as pd
from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.utils.exceptions import IllegalCharacterError

from ..models.column_summary import ColumnDiffSummary, GlobalStatistics
from .summary import render_summary_report

"""Exporters for diff results.

Flat CSV and workbook exports emit one row per (column, row) record with a
1-based row number, columns in the given (union) order and rows ascending
within a column. ``row - 1`` together with the column name locates the
record in the original comparison.
"""

__all__ = [
    "ExportError",
    "ExportKind",
    "FlatDiffRow",
    "CSV_HEADER",
    "WORKBOOK_HEADER",
    "flat_export_rows",
    "render_flat_csv",
    "workbook_rows",
    "render_workbook",
    "write_export",
]

logger = logging.getLogger(__name__)

CSV_HEADER = ["column", "rowIndex", "spreadsheet1", "spreadsheet2", "status"]
WORKBOOK_HEADER = ["Column", "Row", "Spreadsheet 1", "Spreadsheet 2", "Status"]
WORKBOOK_SHEET_TITLE = "Differences"


class ExportError(Exception):
    """Raised when an export target cannot be written."""


class ExportKind(Enum):
    CSV = "csv"
    XLSX = "xlsx"
    SUMMARY = "summary"

    @property
    def default_filename(self) -> str:
        return _DEFAULT_FILENAMES[self]


_DEFAULT_FILENAMES = {
    ExportKind.CSV: "spreadsheet_diff.csv",
    ExportKind.XLSX: "spreadsheet_diff.xlsx",
    ExportKind.SUMMARY: "comparison_summary.txt",
}


@dataclass(frozen=True)
class FlatDiffRow:
    column: str
    row_number: int  # 1-based
    value_a: str
    value_b: str
    status: str

    def as_list(self) -> list[str | int]:
        return [self.column, self.row_number, self.value_a, self.value_b, self.status]


def _rows(summaries: Iterable[ColumnDiffSummary], only_diffs: bool) -> list[FlatDiffRow]:
    rows: list[FlatDiffRow] = []
    for summary in summaries:
        for record in summary.differences:
            if only_diffs and not record.status.is_difference:
                continue
            rows.append(
                FlatDiffRow(
                    column=summary.column,
                    row_number=record.row_number,
                    value_a=record.value_a,
                    value_b=record.value_b,
                    status=record.status.value,
                )
            )
    return rows


def flat_export_rows(summaries: Iterable[ColumnDiffSummary]) -> list[FlatDiffRow]:
    """Non-SAME records only."""
    return _rows(summaries, only_diffs=True)


def render_flat_csv(summaries: Iterable[ColumnDiffSummary]) -> str:
    """CSV text with header ``column,rowIndex,spreadsheet1,spreadsheet2,status``."""
    df = pd.DataFrame(
        [r.as_list() for r in flat_export_rows(summaries)],
        columns=CSV_HEADER,
    )
    return df.to_csv(index=False, lineterminator="\n")


def workbook_rows(
    summaries: Iterable[ColumnDiffSummary], show_only_diffs: bool = True
) -> list[FlatDiffRow]:
    return _rows(summaries, only_diffs=show_only_diffs)


def _worksheet_value(value: str | int) -> str | int:
    """Drop control characters that cannot be stored in worksheet XML."""
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def render_workbook(
    summaries: Iterable[ColumnDiffSummary], show_only_diffs: bool = True
) -> bytes:
    """Single-sheet .xlsx bytes with the workbook header row."""
    wb = Workbook()
    ws = wb.active
    ws.title = WORKBOOK_SHEET_TITLE
    ws.append(WORKBOOK_HEADER)
    for row in workbook_rows(summaries, show_only_diffs=show_only_diffs):
        ws.append([_worksheet_value(v) for v in row.as_list()])
        # cell text is data, never a formula (e.g. "=1+1")
        for cell in ws[ws.max_row]:
            if isinstance(cell.value, str):
                cell.data_type = "s"
    ws.freeze_panes = "A2"
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def write_export(
    kind: ExportKind,
    directory: Path,
    *,
    summaries: Sequence[ColumnDiffSummary] = (),
    statistics: GlobalStatistics | None = None,
    show_only_diffs: bool = True,
    generated_at: datetime | None = None,
    filename: str | None = None,
) -> Path:
    """Render ``kind`` and write it under ``directory``.

    Raises:
        ExportError: rendering input missing or the file cannot be written.
            The comparison result is untouched, so the caller may retry.
    """
    target = Path(directory) / (filename or kind.default_filename)
    if kind is ExportKind.SUMMARY and statistics is None:
        raise ExportError("summary export requires statistics")

    try:
        if kind is ExportKind.CSV:
            payload: bytes = render_flat_csv(summaries).encode("utf-8")
        elif kind is ExportKind.XLSX:
            payload = render_workbook(summaries, show_only_diffs=show_only_diffs)
        else:
            payload = render_summary_report(statistics, generated_at=generated_at).encode("utf-8")
    except (IllegalCharacterError, ValueError, UnicodeError) as e:
        raise ExportError(f"failed to render {kind.value} export: {e}") from e

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(payload)
    except OSError as e:
        raise ExportError(f"failed to write {target}: {e}") from e
    logger.info(f"export {kind.value}: {target} ({len(payload)} bytes)")
    return target
