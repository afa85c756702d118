from __future__ import annotations

import csv
import io

from sheetdiff.models.session import ComparisonSession
from sheetdiff.models.table import Table
from sheetdiff.services.comparison import compare
from sheetdiff.services.export import ExportKind, render_flat_csv

"""Export format contract: header names, 1-based rows, file names."""


def test_csv_header_line():
    a = Table.from_records(["x"], [{"x": "1"}])
    b = Table.from_records(["x"], [{"x": "2"}])
    text = render_flat_csv(compare(ComparisonSession(table_a=a, table_b=b)).summaries)
    lines = text.splitlines()
    assert lines[0] == "column,rowIndex,spreadsheet1,spreadsheet2,status"
    assert lines[1] == "x,1,1,2,changed"


def test_every_exported_row_maps_back_to_its_record(people_tables):
    a, b = people_tables
    result = compare(ComparisonSession(table_a=a, table_b=b))
    reader = csv.DictReader(io.StringIO(render_flat_csv(result.summaries)))
    seen = set()
    for row in reader:
        key = (row["column"], int(row["rowIndex"]) - 1)
        assert key not in seen
        seen.add(key)
        record = result.summary_for(key[0]).differences[key[1]]
        assert record.row_index == key[1]
        assert record.value_a == row["spreadsheet1"]
        assert record.value_b == row["spreadsheet2"]
        assert record.status.value == row["status"]
    assert len(seen) == result.unfiltered_statistics.total_changes


def test_default_file_names():
    assert ExportKind.XLSX.default_filename == "spreadsheet_diff.xlsx"
    assert ExportKind.SUMMARY.default_filename == "comparison_summary.txt"
    assert ExportKind.CSV.default_filename.endswith(".csv")
