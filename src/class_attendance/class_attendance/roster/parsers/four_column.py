from __future__ import annotations

from typing import Optional, Sequence

from ..model import Cell, ParsedName
from .base import RowParser


class FourColumnParser(RowParser):
    """First given name | second given name | first surname | second surname."""

    def parse(self, cells: Sequence[Cell]) -> Optional[ParsedName]:
        first_given = self.cell(cells, 0)
        second_given = self.cell(cells, 1)
        first_surname = self.cell(cells, 2)
        second_surname = self.cell(cells, 3)

        if not first_given or not first_surname:
            return None

        return ParsedName(
            given_names=" ".join(p for p in (first_given, second_given) if p),
            surnames=" ".join(p for p in (first_surname, second_surname) if p),
        )
