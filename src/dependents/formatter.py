"""Formatting of flat results."""

from __future__ import annotations

import math
import shutil
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

COLUMN_GAP = 2


def columns(names: Sequence[str], width: int | None = None) -> str:
    """Lay out names in as many columns as fit in ``width``, filling each column top to bottom.

    Args:
        names: The names to lay out, in order
        width: The available width; defaults to the terminal width, or a single column when stdout is not a
            terminal

    Returns:
        The laid out text, ending with a newline, or an empty string if there are no names

    """
    if not names:
        return ""
    column_width = max(len(name) for name in names) + COLUMN_GAP
    if width is None and not sys.stdout.isatty():
        num_columns = 1
    else:
        if width is None:
            width = shutil.get_terminal_size().columns
        num_columns = max(1, (width + COLUMN_GAP) // column_width)
    if num_columns == 1:
        return "".join(f"{name}\n" for name in names)
    num_rows = math.ceil(len(names) / num_columns)
    lines = []
    for row in range(num_rows):
        cells = names[row::num_rows]
        lines.append("".join(name.ljust(column_width) for name in cells).rstrip())
    return "\n".join(lines) + "\n"
