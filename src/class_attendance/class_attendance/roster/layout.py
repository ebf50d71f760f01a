from __future__ import annotations

from enum import Enum
from typing import Sequence

from .model import Cell


class ColumnLayout(str, Enum):
    """Column formats accepted in a roster upload."""

    FOUR_COLUMN = "four_column"  # first given, second given, first surname, second surname
    TWO_COLUMN = "two_column"  # given names, surnames
    SINGLE_COLUMN = "single_column"  # full name
    INVALID = "invalid"


def detect_layout(cells: Sequence[Cell]) -> ColumnLayout:
    """Pick the layout of a single row from its cell count.

    Three cells are read as the four-column format with the trailing second
    surname missing.
    """

    n = len(cells)
    if n >= 3:
        return ColumnLayout.FOUR_COLUMN
    if n == 2:
        return ColumnLayout.TWO_COLUMN
    if n == 1:
        return ColumnLayout.SINGLE_COLUMN
    return ColumnLayout.INVALID
