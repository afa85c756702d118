from __future__ import annotations

from sheetdiff.models.diff_record import DiffStatus
from sheetdiff.models.session import CategoryFilter, ComparisonSession, FilterSettings
from sheetdiff.models.table import Table
from sheetdiff.services.comparison import compare


def test_compare_full_pipeline(people_tables):
    a, b = people_tables
    result = compare(ComparisonSession(table_a=a, table_b=b))
    assert [s.column for s in result.summaries] == ["id", "name", "city", "legacy", "email"]
    assert [s.column for s in result.browse] == ["city", "name", "legacy", "email", "id"]
    assert result.filtered == result.summaries
    assert result.unfiltered_statistics == result.filtered_statistics
    assert result.unfiltered_statistics.total_changes == 10


def test_unfiltered_and_filtered_statistics_differ(people_tables):
    a, b = people_tables
    session = ComparisonSession(
        table_a=a,
        table_b=b,
        filters=FilterSettings(ignored_columns=frozenset({"city"}), category=CategoryFilter.ADDED),
    )
    result = compare(session)
    assert result.unfiltered_statistics.total_changes == 10
    # id 1 + name 1 + email 2 added
    assert result.filtered_statistics.total_changes == 4
    assert result.filtered_statistics.change_distribution[DiffStatus.REMOVED] == 0
    assert [s.column for s in result.filtered] == ["id", "name", "email"]


def test_missing_or_empty_side_yields_empty_result(people_tables):
    a, _ = people_tables
    assert compare(ComparisonSession()).is_empty
    assert compare(ComparisonSession(table_a=a)).is_empty
    result = compare(ComparisonSession(table_a=a, table_b=Table.empty()))
    assert result.is_empty
    assert result.browse == ()
    assert result.unfiltered_statistics.total_changes == 0


def test_replacing_a_side_recomputes(people_tables):
    a, b = people_tables
    session = ComparisonSession(table_a=a, table_b=b)
    first = compare(session)
    same = compare(session.with_table_b(a))
    assert first.unfiltered_statistics.total_changes == 10
    assert same.unfiltered_statistics.total_changes == 0
    # the original session is untouched
    assert session.table_b is b


def test_compare_is_idempotent(people_tables):
    a, b = people_tables
    session = ComparisonSession(table_a=a, table_b=b)
    assert compare(session) == compare(session)


def test_on_column_callback(people_tables):
    a, b = people_tables
    seen: list[str] = []
    compare(ComparisonSession(table_a=a, table_b=b), on_column=seen.append)
    assert seen == ["id", "name", "city", "legacy", "email"]


def test_summary_for(people_tables):
    a, b = people_tables
    result = compare(ComparisonSession(table_a=a, table_b=b))
    assert result.summary_for("email").only_in_b
    assert result.summary_for("nope") is None
