from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Any

import pandas as pd

from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import ErrorRecord
from ..models.table import Table, TableError

"""Tabular reader: turns a file or pasted text into a ``Table``.

Supported inputs:
- ``.csv`` (comma) / ``.tsv`` ``.tab`` (tab): all cells read as text,
  no NA conversion, header names trimmed, all-blank rows dropped.
- ``.xlsx`` / ``.xls``: first sheet only; the header row is detected among
  the first rows (a title block above the header is skipped).
- pasted text: delimiter sniffed, otherwise same as CSV.

``load_table_or_empty`` / ``parse_pasted_or_empty`` never raise; a source
that cannot be read becomes an empty table so the comparison still runs.
"""

__all__ = [
    "TableReadError",
    "UnsupportedFormatError",
    "read_table",
    "parse_pasted",
    "load_table_or_empty",
    "parse_pasted_or_empty",
    "detect_header_row",
]

logger = logging.getLogger(__name__)

DELIMITED_SUFFIXES = {".csv": ",", ".tsv": "\t", ".tab": "\t"}
WORKBOOK_SUFFIXES = {".xlsx", ".xls"}
PASTED_SOURCE = "<pasted>"
SNIFF_DELIMITERS = ",\t;|"

DEFAULT_HEADER_SCAN_ROWS = 6
DEFAULT_HEADER_MIN_FILLED = 4


class TableReadError(Exception):
    """Raised when a source cannot be parsed into a table."""


class UnsupportedFormatError(TableReadError):
    """Raised for file extensions the reader does not handle."""


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and pd.isna(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def _frame_to_table(df: pd.DataFrame, source: str) -> Table:
    columns = [str(c).strip() for c in df.columns]
    rows: list[dict[str, Any]] = []
    for raw in df.itertuples(index=False, name=None):
        if all(_is_blank(v) for v in raw):
            continue
        rows.append(dict(zip(columns, raw, strict=False)))
    try:
        return Table.from_records(columns, rows, source=source)
    except TableError as e:
        raise TableReadError(f"{source}: {e}") from e


def _header_width(text: str, sep: str) -> int:
    for fields in csv.reader(io.StringIO(text), delimiter=sep):
        if fields:
            return len(fields)
    return 0


def _read_delimited(text: str, sep: str, source: str) -> Table:
    width = _header_width(text, sep)
    try:
        # rows longer than the header are cut to the header width, shorter
        # ones are padded with NaN
        df = pd.read_csv(
            io.StringIO(text),
            sep=sep,
            engine="python",
            dtype=str,
            index_col=False,
            keep_default_na=False,
            skip_blank_lines=True,
            on_bad_lines=lambda fields: fields[:width],
        )
    except pd.errors.EmptyDataError:
        # no header at all
        return Table.empty(source=source)
    except (pd.errors.ParserError, UnicodeDecodeError, ValueError) as e:
        raise TableReadError(f"failed to parse {source}: {e}") from e
    return _frame_to_table(df, source)


def detect_header_row(
    raw: pd.DataFrame,
    scan_rows: int = DEFAULT_HEADER_SCAN_ROWS,
    min_filled: int = DEFAULT_HEADER_MIN_FILLED,
) -> int:
    """Index of the header row in a header-less sheet frame.

    The first of the leading ``scan_rows`` rows with at least ``min_filled``
    non-blank cells; row 0 when none qualifies.
    """
    for idx in range(min(scan_rows, raw.shape[0])):
        filled = sum(1 for v in raw.iloc[idx].tolist() if not _is_blank(v))
        if filled >= min_filled:
            return idx
    return 0


def _read_workbook(path: Path, scan_rows: int, min_filled: int) -> Table:
    source = path.name
    try:
        raw = pd.read_excel(path, sheet_name=0, header=None, dtype=object)
    except Exception as e:  # engines raise their own types (BadZipFile, missing engine, ...)
        raise TableReadError(f"failed to read workbook {source}: {e}") from e

    if raw.shape[0] == 0:
        return Table.empty(source=source)

    header_idx = detect_header_row(raw, scan_rows=scan_rows, min_filled=min_filled)
    header: list[str] = []
    for col_idx, value in enumerate(raw.iloc[header_idx].tolist()):
        name = "" if _is_blank(value) else str(value).strip()
        name = name or f"Unnamed: {col_idx}"
        # duplicate names get the same ".N" suffix pandas gives CSV headers
        candidate, dup = name, 0
        while candidate in header:
            dup += 1
            candidate = f"{name}.{dup}"
        header.append(candidate)

    data = raw.iloc[header_idx + 1:].copy()
    data.columns = header
    # NaN -> None so blank cells become NULL cells
    data = data.astype(object).where(data.notna(), None)
    return _frame_to_table(data, source)


def read_table(
    path: Path,
    *,
    header_scan_rows: int = DEFAULT_HEADER_SCAN_ROWS,
    header_min_filled: int = DEFAULT_HEADER_MIN_FILLED,
) -> Table:
    """Read a CSV/TSV/XLSX file into a Table.

    Raises:
        UnsupportedFormatError: unknown extension
        TableReadError: file missing or not parseable
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in DELIMITED_SUFFIXES and suffix not in WORKBOOK_SUFFIXES:
        raise UnsupportedFormatError(f"unsupported file type: {path.name}")
    if not path.exists():
        raise TableReadError(f"file not found: {path}")

    if suffix in WORKBOOK_SUFFIXES:
        table = _read_workbook(path, header_scan_rows, header_min_filled)
    else:
        try:
            text = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise TableReadError(f"failed to read {path.name}: {e}") from e
        table = _read_delimited(text, DELIMITED_SUFFIXES[suffix], path.name)

    logger.debug(f"read {path.name}: columns={len(table.columns)} rows={table.row_count}")
    return table


def _sniff_delimiter(text: str) -> str:
    sample = "\n".join(text.splitlines()[:20])
    try:
        return csv.Sniffer().sniff(sample, delimiters=SNIFF_DELIMITERS).delimiter
    except csv.Error:
        return "\t" if "\t" in sample and "," not in sample else ","


def parse_pasted(text: str) -> Table:
    """Parse pasted delimited text (header line first)."""
    stripped = text.strip()
    if not stripped:
        return Table.empty(source=PASTED_SOURCE)
    sep = _sniff_delimiter(stripped)
    return _read_delimited(stripped, sep, PASTED_SOURCE)


def _record_failure(
    error: Exception, source: str, side: str, error_log: ErrorLogBuffer | None
) -> None:
    logger.warning(f"input {side}: {error} -> treated as empty table")
    if error_log is not None:
        error_type = "UNSUPPORTED_FORMAT" if isinstance(error, UnsupportedFormatError) else "PARSE_FAILED"
        error_log.append(ErrorRecord.create(source, side, error_type, str(error)))


def load_table_or_empty(
    path: Path,
    side: str,
    *,
    error_log: ErrorLogBuffer | None = None,
    header_scan_rows: int = DEFAULT_HEADER_SCAN_ROWS,
    header_min_filled: int = DEFAULT_HEADER_MIN_FILLED,
) -> tuple[Table, bool]:
    """Read ``path``; on failure log it and return an empty table.

    Returns:
        (table, ok) where ok is False when the source could not be read
    """
    try:
        table = read_table(
            path, header_scan_rows=header_scan_rows, header_min_filled=header_min_filled
        )
    except TableReadError as e:
        _record_failure(e, Path(path).name, side, error_log)
        return Table.empty(source=Path(path).name), False
    return table, True


def parse_pasted_or_empty(
    text: str, side: str, *, error_log: ErrorLogBuffer | None = None
) -> tuple[Table, bool]:
    try:
        return parse_pasted(text), True
    except TableReadError as e:
        _record_failure(e, PASTED_SOURCE, side, error_log)
        return Table.empty(source=PASTED_SOURCE), False
