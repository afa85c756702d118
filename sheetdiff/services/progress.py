from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Column progress display with tqdm (TTY only).

A single tqdm bar advances once per classified column. In non-TTY
environments (CI, pipes) no bar is created, so no ANSI control sequences
end up in captured output.
"""

__all__ = [
    "ColumnProgress",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ColumnProgress:
    """Progress bar over the aligned columns of one comparison.

    Pass ``advance`` as the ``on_column`` callback of ``compare``.
    """

    def __init__(self, total_columns: int, *, description: str = "Comparing columns") -> None:
        self.total_columns = total_columns
        self.description = description
        self.completed = 0
        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_columns,
                desc=description,
                unit="col",
                leave=False,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def advance(self, column: str) -> None:
        self.completed += 1
        if self.pbar is not None:
            self.pbar.set_postfix(column=column[:20])
            self.pbar.update(1)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ColumnProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
