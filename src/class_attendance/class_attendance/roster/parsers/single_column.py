from __future__ import annotations

from typing import Optional, Sequence

from ..model import Cell, ParsedName
from .base import RowParser


def split_full_name(full_name: str) -> ParsedName:
    """Split a full name written in one cell.

    1 token: given name only. 2 tokens: given name + surname. 3 tokens: one
    given name + compound surname ("Juan Perez Garcia"). 4 or more: first half
    are given names, second half surnames.
    """

    parts = full_name.split()
    if not parts:
        return ParsedName(given_names="", surnames="")
    if len(parts) == 1:
        return ParsedName(given_names=parts[0], surnames="")
    if len(parts) == 2:
        return ParsedName(given_names=parts[0], surnames=parts[1])
    if len(parts) == 3:
        return ParsedName(given_names=parts[0], surnames=f"{parts[1]} {parts[2]}")

    middle = len(parts) // 2
    return ParsedName(given_names=" ".join(parts[:middle]), surnames=" ".join(parts[middle:]))


class SingleColumnParser(RowParser):
    """Full name in a single cell."""

    def parse(self, cells: Sequence[Cell]) -> Optional[ParsedName]:
        full_name = self.cell(cells, 0)
        if not full_name:
            return None

        parsed = split_full_name(full_name)
        if not parsed.given_names:
            return None
        return parsed
