from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ...common.text import cell_text
from ..model import Cell, ParsedName


class RowParser(ABC):
    """Strategy Pattern: turn the cells of one row into a name, or reject it."""

    @abstractmethod
    def parse(self, cells: Sequence[Cell]) -> Optional[ParsedName]:
        raise NotImplementedError

    @staticmethod
    def cell(cells: Sequence[Cell], index: int) -> str:
        if index >= len(cells):
            return ""
        return cell_text(cells[index])


class RejectRowParser(RowParser):
    """Rows without interpretable content."""

    def parse(self, cells: Sequence[Cell]) -> Optional[ParsedName]:
        return None
