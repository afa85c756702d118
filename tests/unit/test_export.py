from __future__ import annotations

import csv
import io

import pytest
from openpyxl import load_workbook

from sheetdiff.models.session import ComparisonSession
from sheetdiff.models.table import Table
from sheetdiff.services.comparison import compare
from sheetdiff.services.export import (
    CSV_HEADER,
    WORKBOOK_HEADER,
    ExportError,
    ExportKind,
    flat_export_rows,
    render_flat_csv,
    render_workbook,
    write_export,
)


@pytest.fixture()
def result(people_tables):
    a, b = people_tables
    return compare(ComparisonSession(table_a=a, table_b=b))


def test_flat_rows_only_differences_in_order(result):
    rows = flat_export_rows(result.summaries)
    assert len(rows) == result.unfiltered_statistics.total_changes
    assert all(r.status != "same" for r in rows)
    order = [(r.column, r.row_number) for r in rows]
    assert order[:3] == [("id", 4), ("name", 1), ("name", 4)]
    assert order[-2:] == [("email", 1), ("email", 3)]


def test_flat_csv_round_trip(result):
    text = render_flat_csv(result.summaries)
    parsed = list(csv.reader(io.StringIO(text)))
    assert parsed[0] == CSV_HEADER
    for column, row_number, value_a, value_b, status in parsed[1:]:
        record = result.summary_for(column).differences[int(row_number) - 1]
        assert (record.value_a, record.value_b, record.status.value) == (value_a, value_b, status)


def test_flat_csv_quotes_special_values():
    a = Table.from_records(["note"], [{"note": 'a, "quoted"\nline'}])
    b = Table.from_records(["note"], [{"note": "plain"}])
    text = render_flat_csv(compare(ComparisonSession(table_a=a, table_b=b)).summaries)
    parsed = list(csv.reader(io.StringIO(text)))
    assert parsed[1] == ["note", "1", 'a, "quoted"\nline', "plain", "changed"]


def test_flat_csv_empty_has_header_only():
    assert render_flat_csv([]).strip() == ",".join(CSV_HEADER)


def test_workbook_only_diffs(result):
    wb = load_workbook(io.BytesIO(render_workbook(result.summaries)))
    assert len(wb.sheetnames) == 1
    rows = list(wb.active.iter_rows(values_only=True))
    assert list(rows[0]) == WORKBOOK_HEADER
    assert len(rows) - 1 == 10
    assert rows[1][:2] == ("id", 4)
    assert rows[1][2] in (None, "")  # empty strings may be stored as blank cells
    assert rows[1][3:] == ("4", "added")


def test_workbook_with_same_rows(result):
    wb = load_workbook(io.BytesIO(render_workbook(result.summaries, show_only_diffs=False)))
    rows = list(wb.active.iter_rows(values_only=True))
    # every record of every column: 5 columns x 4 rows
    assert len(rows) - 1 == 20
    assert "same" in {r[4] for r in rows[1:]}


def test_write_export_files(tmp_path, result):
    csv_path = write_export(ExportKind.CSV, tmp_path, summaries=result.summaries)
    xlsx_path = write_export(ExportKind.XLSX, tmp_path, summaries=result.summaries)
    txt_path = write_export(
        ExportKind.SUMMARY, tmp_path / "nested", statistics=result.unfiltered_statistics
    )
    assert csv_path.name == "spreadsheet_diff.csv"
    assert xlsx_path.name == "spreadsheet_diff.xlsx"
    assert txt_path.name == "comparison_summary.txt"
    assert "Total changes: 10" in txt_path.read_text(encoding="utf-8")


def test_write_export_failure_raises_export_error(tmp_path, result):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(ExportError):
        write_export(ExportKind.CSV, blocker, summaries=result.summaries)
    # comparison result still usable for another attempt
    assert write_export(ExportKind.CSV, tmp_path, summaries=result.summaries).exists()


def test_summary_export_requires_statistics(tmp_path):
    with pytest.raises(ExportError):
        write_export(ExportKind.SUMMARY, tmp_path)


def test_workbook_strips_control_characters(tmp_path):
    a = Table.from_records(["note"], [{"note": "ab\x0bc"}])
    b = Table.from_records(["note"], [{"note": "plain\x00"}])
    summaries = compare(ComparisonSession(table_a=a, table_b=b)).summaries
    path = write_export(ExportKind.XLSX, tmp_path, summaries=summaries)
    rows = list(load_workbook(path).active.iter_rows(values_only=True))
    assert rows[1] == ("note", 1, "abc", "plain", "changed")


def test_workbook_keeps_formula_like_text_as_text():
    a = Table.from_records(["calc"], [{"calc": "=1+1"}])
    b = Table.from_records(["calc"], [{"calc": "=SUM(A1:A2)"}])
    summaries = compare(ComparisonSession(table_a=a, table_b=b)).summaries
    ws = load_workbook(io.BytesIO(render_workbook(summaries))).active
    assert ws["C2"].value == "=1+1"
    assert ws["C2"].data_type == "s"
    assert ws["D2"].value == "=SUM(A1:A2)"
    assert ws["D2"].data_type == "s"


def test_render_failure_raises_export_error(tmp_path, monkeypatch):
    def broken(*args, **kwargs):
        raise ValueError("cannot render")

    monkeypatch.setattr("sheetdiff.services.export.render_workbook", broken)
    with pytest.raises(ExportError, match="cannot render"):
        write_export(ExportKind.XLSX, tmp_path, summaries=[])
    assert not (tmp_path / "spreadsheet_diff.xlsx").exists()
