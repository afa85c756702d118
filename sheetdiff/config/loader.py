from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.session import CategoryFilter, FilterSettings

"""Config loader.

Responsibilities:
- Load the optional YAML config (default ``config/sheetdiff.yml``)
- Validate against the bundled JSON schema (``config_schema.json``)
- Apply defaults for every missing key

A missing file is not an error: the defaults are returned.
"""

__all__ = [
    "ConfigError",
    "ExportConfig",
    "ReaderConfig",
    "DiffConfig",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/sheetdiff.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ExportConfig:
    output_directory: str = "./output"
    formats: tuple[str, ...] = ()
    show_only_diffs: bool = True
    columns: tuple[str, ...] = ()  # empty -> all columns


@dataclass(frozen=True)
class ReaderConfig:
    header_scan_rows: int = 6
    header_min_filled: int = 4


@dataclass(frozen=True)
class DiffConfig:
    filters: FilterSettings = field(default_factory=FilterSettings)
    export: ExportConfig = field(default_factory=ExportConfig)
    reader: ReaderConfig = field(default_factory=ReaderConfig)
    top_columns: int = 5


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing or invalid, or the data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path | None = None) -> DiffConfig:
    path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not path.exists():
        return DiffConfig()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    f_raw = data.get("filters", {})
    e_raw = data.get("export", {})
    r_raw = data.get("reader", {})
    filters = FilterSettings(
        ignored_columns=frozenset(f_raw.get("ignored_columns", [])),
        category=CategoryFilter(f_raw.get("category", "all")),
        min_difference_percentage=float(f_raw.get("min_difference_percentage", 0)),
        hide_identical=bool(f_raw.get("hide_identical", False)),
    )
    export = ExportConfig(
        output_directory=e_raw.get("output_directory", "./output"),
        formats=tuple(e_raw.get("formats", [])),
        show_only_diffs=bool(e_raw.get("show_only_diffs", True)),
        columns=tuple(e_raw.get("columns", [])),
    )
    reader = ReaderConfig(
        header_scan_rows=r_raw.get("header_scan_rows", 6),
        header_min_filled=r_raw.get("header_min_filled", 4),
    )
    return DiffConfig(
        filters=filters,
        export=export,
        reader=reader,
        top_columns=data.get("report", {}).get("top_columns", 5),
    )
