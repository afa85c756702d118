from __future__ import annotations

import math
from datetime import date, datetime

import numpy as np
import pytest

from sheetdiff.models.table import ABSENT, Cell, CellKind, Table, TableError


@pytest.mark.parametrize(
    "raw, kind, normalized",
    [
        ("  Alice ", CellKind.STRING, "Alice"),
        ("", CellKind.STRING, ""),
        (None, CellKind.NULL, ""),
        (float("nan"), CellKind.NULL, ""),
        (5, CellKind.NUMBER, "5"),
        (5.0, CellKind.NUMBER, "5"),
        (1.5, CellKind.NUMBER, "1.5"),
        (np.int64(7), CellKind.NUMBER, "7"),
        (np.float64(2.25), CellKind.NUMBER, "2.25"),
        (True, CellKind.STRING, "true"),
        (date(2024, 1, 2), CellKind.STRING, "2024-01-02"),
        (datetime(2024, 1, 2, 3, 4, 5), CellKind.STRING, "2024-01-02T03:04:05"),
    ],
)
def test_cell_from_raw_and_normalize(raw, kind, normalized):
    cell = Cell.from_raw(raw)
    assert cell.kind is kind
    assert cell.normalized() == normalized


def test_absent_cell_normalizes_to_empty():
    assert ABSENT.kind is CellKind.ABSENT
    assert ABSENT.normalized() == ""


def test_infinite_number_normalizes():
    assert Cell.from_raw(math.inf).normalized() == "Infinity"


def test_table_cell_out_of_range_and_missing_key():
    t = Table.from_records(["a", "b"], [{"a": "1"}])
    assert t.cell(0, "a").normalized() == "1"
    assert t.cell(0, "b") is ABSENT  # sparse row
    assert t.cell(1, "a") is ABSENT  # past the last row
    assert t.cell(0, "zzz") is ABSENT


def test_table_positions_and_emptiness():
    t = Table.from_records(["x", "y"], [])
    assert t.position("y") == 1
    assert t.position("missing") is None
    assert t.is_empty
    assert Table.empty().columns == ()


def test_table_rejects_duplicate_columns():
    with pytest.raises(TableError):
        Table.from_records(["a", "a"], [])


def test_table_rows_are_copied():
    source_row = {"a": "1"}
    t = Table.from_records(["a"], [source_row])
    source_row["a"] = "changed"
    assert t.cell(0, "a").normalized() == "1"


def test_table_rows_are_read_only():
    t = Table.from_records(["a"], [{"a": "1"}])
    with pytest.raises(TypeError):
        t.rows[0]["a"] = "x"
    assert t.cell(0, "a").normalized() == "1"
    assert t.rows[0] == {"a": "1"}
