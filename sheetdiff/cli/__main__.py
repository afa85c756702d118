from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from sheetdiff.config.loader import DEFAULT_CONFIG_PATH, ConfigError, DiffConfig, load_config
from sheetdiff.excel.reader import load_table_or_empty, parse_pasted_or_empty
from sheetdiff.logging.error_log import ErrorLogBuffer
from sheetdiff.logging.init import log_summary, setup_logging
from sheetdiff.models.error_record import ErrorRecord
from sheetdiff.models.session import CategoryFilter, ComparisonSession, FilterSettings
from sheetdiff.models.table import Table
from sheetdiff.services.aggregator import severity_for
from sheetdiff.services.comparison import ComparisonResult, compare
from sheetdiff.services.export import ExportError, ExportKind, write_export
from sheetdiff.services.filters import select_export_columns
from sheetdiff.services.progress import ColumnProgress
from sheetdiff.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env and the optional YAML config, then apply CLI overrides
- Read both sides (a side that cannot be read becomes an empty table)
- Compare, print the ranked browse list, log a SUMMARY line
- Write the requested exports (a failed export does not stop the others)

``-`` as LEFT or RIGHT reads pasted delimited text from stdin.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

CONFIG_ENV_VAR = "SHEETDIFF_CONFIG"
STDIN_MARKER = "-"


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env via python-dotenv; failure only warns."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except OSError as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="sheetdiff", description="Column-by-column spreadsheet diff")
    p.add_argument("left", help="Spreadsheet 1 (.csv/.tsv/.xlsx, or - for stdin)")
    p.add_argument("right", help="Spreadsheet 2 (.csv/.tsv/.xlsx, or - for stdin)")
    p.add_argument("--config", type=Path, default=None, help="YAML config path")
    p.add_argument("--category", choices=[c.value for c in CategoryFilter], default=None)
    p.add_argument("--min-pct", type=float, default=None, help="Minimum difference percentage (0-100)")
    p.add_argument("--ignore", action="append", default=None, metavar="COLUMN", help="Column to ignore")
    p.add_argument("--hide-identical", action="store_true", default=None)
    p.add_argument(
        "--export", action="append", default=None,
        choices=[k.value for k in ExportKind], help="Export format (repeatable)",
    )
    p.add_argument("--columns", action="append", default=None, metavar="COLUMN", help="Export only these columns")
    p.add_argument("--include-same", action="store_true", help="Workbook export also lists identical cells")
    p.add_argument("--output-dir", type=Path, default=None)
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _resolve_filters(cfg: DiffConfig, args: argparse.Namespace) -> FilterSettings:
    base = cfg.filters
    return FilterSettings(
        ignored_columns=frozenset(args.ignore) if args.ignore is not None else base.ignored_columns,
        category=CategoryFilter(args.category) if args.category is not None else base.category,
        min_difference_percentage=(
            args.min_pct if args.min_pct is not None else base.min_difference_percentage
        ),
        hide_identical=bool(args.hide_identical) or base.hide_identical,
    )


def _read_side(
    source: str, side: str, cfg: DiffConfig, error_log: ErrorLogBuffer
) -> tuple[Table, bool]:
    if source == STDIN_MARKER:
        return parse_pasted_or_empty(sys.stdin.read(), side, error_log=error_log)
    return load_table_or_empty(
        Path(source),
        side,
        error_log=error_log,
        header_scan_rows=cfg.reader.header_scan_rows,
        header_min_filled=cfg.reader.header_min_filled,
    )


def _print_browse_list(result: ComparisonResult) -> None:
    if result.is_empty:
        print("no data to compare: upload or paste data for both spreadsheets")
        return
    if not result.browse:
        print("no columns match")
        return
    for s in result.browse:
        letters = f"{s.alignment.letter_a or '-'}/{s.alignment.letter_b or '-'}"
        if s.only_in_a:
            presence = " [only in 1]"
        elif s.only_in_b:
            presence = " [only in 2]"
        else:
            presence = ""
        severity = severity_for(s.diff_count, s.total_rows)
        print(
            f"  {s.column} ({letters}){presence}: {s.diff_count}/{s.total_rows} "
            f"({s.difference_percentage:.1f}%) {severity.value}"
        )


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    config_path = args.config or Path(os.getenv(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        filters = _resolve_filters(cfg, args)
    except ValueError as e:
        logger.error(f"filters: {e}")
        return EXIT_FATAL

    error_log = ErrorLogBuffer()
    table_a, ok_a = _read_side(args.left, "A", cfg, error_log)
    table_b, ok_b = _read_side(args.right, "B", cfg, error_log)
    partial = not (ok_a and ok_b)
    logger.info(
        f"comparing {table_a.source} ({table_a.row_count} rows) "
        f"vs {table_b.source} ({table_b.row_count} rows)"
    )

    session = ComparisonSession(table_a=table_a, table_b=table_b, filters=filters)
    total_columns = len(set(table_a.columns) | set(table_b.columns))
    with ColumnProgress(total_columns) as progress:
        result = compare(session, top_n=cfg.top_columns, on_column=progress.advance)

    _print_browse_list(result)

    formats = args.export if args.export is not None else list(cfg.export.formats)
    output_dir = args.output_dir or Path(cfg.export.output_directory)
    selected = args.columns if args.columns is not None else list(cfg.export.columns)
    show_only_diffs = cfg.export.show_only_diffs and not args.include_same
    export_set = select_export_columns(result.filtered, selected)
    for fmt in dict.fromkeys(formats):
        kind = ExportKind(fmt)
        try:
            write_export(
                kind,
                output_dir,
                summaries=export_set,
                statistics=result.unfiltered_statistics,
                show_only_diffs=show_only_diffs,
            )
        except ExportError as e:
            logger.error(f"export {kind.value} failed: {e}")
            error_log.append(ErrorRecord.create(str(output_dir), "export", "EXPORT_FAILED", str(e)))
            partial = True

    summary_line = render_summary_line(len(result.summaries), result.unfiltered_statistics)
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line[len("SUMMARY "):])

    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log: {log_path}")

    return EXIT_PARTIAL_FAILURE if partial else EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
