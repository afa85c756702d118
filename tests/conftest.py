# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from sheetdiff.logging.init import reset_logging
from sheetdiff.models.table import Table


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("SHEETDIFF_CONFIG", raising=False)
        yield p


@pytest.fixture(autouse=True)
def clean_logging():
    # handlers bind sys.stdout at creation; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """filters:
  category: all
  min_difference_percentage: 0
  ignored_columns: [updated_at]
  hide_identical: false
export:
  output_directory: ./output
  formats: [csv, summary]
  show_only_diffs: true
report:
  top_columns: 3
reader:
  header_scan_rows: 6
  header_min_filled: 2
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "sheetdiff.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def people_tables() -> tuple[Table, Table]:
    """Two small tables: one changed name, one added row, one column per side."""
    a = Table.from_records(
        ["id", "name", "city", "legacy"],
        [
            {"id": "1", "name": "Alice", "city": "Paris", "legacy": "x"},
            {"id": "2", "name": "Bob", "city": "Rome", "legacy": "y"},
            {"id": "3", "name": "Carol", "city": "", "legacy": ""},
        ],
        source="a.csv",
    )
    b = Table.from_records(
        ["id", "name", "city", "email"],
        [
            {"id": "1", "name": "Alicia", "city": "Paris", "email": "a@example.com"},
            {"id": "2", "name": "Bob", "city": "", "email": ""},
            {"id": "3", "name": "Carol", "city": "Oslo", "email": "c@example.com"},
            {"id": "4", "name": "Dan", "city": "Lima", "email": ""},
        ],
        source="b.csv",
    )
    return a, b
