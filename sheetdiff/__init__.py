"""Column-oriented spreadsheet diff engine.

Two tables are aligned by column name, compared row by row by ordinal
position, and reported as ranked, filterable, exportable diff summaries.
"""

__version__ = "0.1.0"
