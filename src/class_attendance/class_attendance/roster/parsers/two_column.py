from __future__ import annotations

from typing import Optional, Sequence

from ..model import Cell, ParsedName
from .base import RowParser


class TwoColumnParser(RowParser):
    """Given names | surnames."""

    def parse(self, cells: Sequence[Cell]) -> Optional[ParsedName]:
        given_names = self.cell(cells, 0)
        surnames = self.cell(cells, 1)
        if not given_names or not surnames:
            return None
        return ParsedName(given_names=given_names, surnames=surnames)
